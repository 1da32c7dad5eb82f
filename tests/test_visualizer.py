import matplotlib
matplotlib.use("Agg")

from btree_index.db.btree import BTree
from btree_index.viz.visualizer import format_tree, print_tree, tree_to_networkx, hierarchy_pos, visualize_tree


def small_tree():
    t = BTree(3)
    for k in (10, 20, 5, 6):
        t.insert(k)
    return t


def demo_tree():
    t = BTree(3)
    for k in (10, 20, 5, 6, 12, 30, 7, 17, 25, 40, 50, 60):
        t.insert(k)
    return t


def test_format_tree_indents_per_level():
    assert format_tree(small_tree()).splitlines() == [
        "B-Tree Structure:",
        "Keys: [10]",
        "  Keys: [5, 6]",
        "  Keys: [20]",
    ]


def test_print_tree(capsys):
    print_tree(small_tree())
    out = capsys.readouterr().out
    assert out.startswith("B-Tree Structure:\n")
    assert out.endswith("\n\n")


def test_tree_to_networkx_preorder_ids():
    G = tree_to_networkx(demo_tree())
    assert G.number_of_nodes() == 7
    assert G.number_of_edges() == 6
    assert G.nodes[0]["keys"] == [20]
    assert G.nodes[0]["level"] == 0
    assert not G.nodes[0]["leaf"]
    assert G.nodes[2]["keys"] == [5, 6, 7]
    assert G.nodes[2]["label"] == "5 | 6 | 7"
    assert list(G.successors(0)) == [1, 4]
    assert list(G.successors(1)) == [2, 3]


def test_hierarchy_pos_centers_parents():
    G = tree_to_networkx(demo_tree())
    pos = hierarchy_pos(G)
    assert pos[2] == (0.0, -2.0)
    assert pos[6] == (3.0, -2.0)
    assert pos[1] == (0.5, -1.0)
    assert pos[0] == (1.5, 0.0)


def test_visualize_tree_writes_png(tmp_path):
    out = visualize_tree(demo_tree(), out=tmp_path / "plots" / "tree.png", highlight=[25])
    assert out.exists()
    assert out.stat().st_size > 0
