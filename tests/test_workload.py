import pytest

from btree_index.sim.workload import WorkloadSimulator
from btree_index.analysis.walks import validate


def test_workload_basic():
    sim = WorkloadSimulator(max_keys=3, seed=0)
    res = sim.run(50, n_deletes=20, key_space=200, n_searches=30)

    assert len(res["steps"]) == 100
    assert len(res["trace"]) == 100
    assert res["deleted"] + res["unsupported_deletes"] == 20
    assert res["total_keys"] == 50 - res["deleted"]
    assert res["total_keys"] == len(sim.tree)
    assert res["final_height"] == sim.tree.height()
    assert res["final_nodes"] == sim.tree.count_nodes()
    searches = [s for s in res["steps"] if s["op"] == "search"]
    assert res["search_hits"] == sum(1 for s in searches if s["result"])
    assert validate(sim.tree)


def test_workload_height_monotonic():
    sim = WorkloadSimulator(max_keys=4, seed=1)
    res = sim.run(300, n_deletes=100, key_space=5000)
    trace = res["trace"]

    inserts = trace[trace["op"] == "insert"]["height"].tolist()
    for a, b in zip(inserts, inserts[1:]):
        assert a <= b <= a + 1

    deletes = trace[trace["op"] == "delete"]["height"].tolist()
    for a, b in zip(deletes, deletes[1:]):
        assert b <= a


def test_workload_is_reproducible_with_seed():
    a = WorkloadSimulator(max_keys=3, seed=42).run(40, n_deletes=10, key_space=100, n_searches=10)
    b = WorkloadSimulator(max_keys=3, seed=42).run(40, n_deletes=10, key_space=100, n_searches=10)
    assert a["trace"].equals(b["trace"])


def test_workload_rejects_too_small_key_space():
    with pytest.raises(ValueError):
        WorkloadSimulator(seed=0).run(20, key_space=10)


def test_workload_second_run_counts_only_new_keys():
    sim = WorkloadSimulator(max_keys=3, seed=0)
    first = sim.run(8, key_space=10)
    assert first["total_keys"] == 8

    res = sim.run(8, key_space=10)
    assert res["total_keys"] == len(sim.tree)
    # la traza es solo la de esta llamada
    assert len(res["steps"]) == 8
    new_keys = [s for s in res["steps"] if s["op"] == "insert" and s["result"]]
    assert len(new_keys) == len(sim.tree) - 8
    assert res["steps"][-1]["keys"] == len(sim.tree)
