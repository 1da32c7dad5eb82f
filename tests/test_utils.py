import pandas as pd
import pytest

from btree_index.db.btree import BTree
from btree_index.sim.workload import WorkloadSimulator
from btree_index.utils import read_keys_file, save_level_report, save_trace


def test_read_keys_file(tmp_path):
    p = tmp_path / "keys.txt"
    p.write_text("# claves de prueba\n10, 20 5\n\n6,12  # fin\n", encoding="utf-8")
    assert read_keys_file(p) == [10, 20, 5, 6, 12]


def test_read_keys_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_keys_file(tmp_path / "nope.txt")


def test_save_level_report(tmp_path):
    t = BTree(3)
    for k in (10, 20, 5, 6):
        t.insert(k)
    out = save_level_report(t, tmp_path / "out")
    assert out.name == "levels.csv"
    df = pd.read_csv(out)
    assert list(df["nodes"]) == [1, 2]
    assert list(df["keys"]) == [1, 3]


def test_save_trace(tmp_path):
    res = WorkloadSimulator(seed=0).run(10, key_space=50)
    out = save_trace(res, tmp_path, filename="t.csv")
    df = pd.read_csv(out)
    assert len(df) == 10
    assert list(df.columns) == ["step", "op", "key", "result", "height", "nodes", "keys"]
