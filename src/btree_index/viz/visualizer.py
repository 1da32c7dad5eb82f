# src/btree_index/viz/visualizer.py
"""
Visualización del B-Tree:
- format_tree / print_tree: volcado de texto indentado por nivel (solo para humanos).
- tree_to_networkx + hierarchy_pos + visualize_tree: dibujo con networkx + matplotlib.
"""
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx

from btree_index.db.btree import BTree, BTreeNode


def format_tree(tree: BTree) -> str:
    lines = ["B-Tree Structure:"]
    _format_node(tree.root, 0, lines)
    return "\n".join(lines)


def _format_node(node: BTreeNode, level: int, lines: List[str]) -> None:
    lines.append("  " * level + f"Keys: {node.keys}")
    if not node.leaf:
        for child in node.children:
            _format_node(child, level + 1, lines)


def print_tree(tree: BTree) -> None:
    print(format_tree(tree))
    print()


def tree_to_networkx(tree: BTree) -> nx.DiGraph:
    """
    Un nodo de networkx por nodo del árbol (ids en pre-orden, raíz = 0),
    aristas padre -> hijo. Atributos: keys, level, leaf, label.
    """
    G = nx.DiGraph()
    counter = 0
    stack = [(tree.root, None, 0)]
    while stack:
        node, parent_id, level = stack.pop()
        nid = counter
        counter += 1
        G.add_node(nid, keys=list(node.keys), level=level, leaf=node.leaf,
                   label=" | ".join(str(k) for k in node.keys))
        if parent_id is not None:
            G.add_edge(parent_id, nid)
        if not node.leaf:
            # apilar al revés para visitar children[0] primero
            for child in reversed(node.children):
                stack.append((child, nid, level + 1))
    return G


def hierarchy_pos(G: nx.DiGraph, root: int = 0) -> Dict[int, Tuple[float, float]]:
    """
    Layout por capas: hojas repartidas en x (orden de izquierda a derecha),
    padres centrados sobre sus hijos, y = -level.
    """
    pos: Dict[int, Tuple[float, float]] = {}
    next_x = [0.0]

    def place(n: int) -> float:
        children = list(G.successors(n))
        if not children:
            x = next_x[0]
            next_x[0] += 1.0
        else:
            xs = [place(c) for c in children]
            x = (xs[0] + xs[-1]) / 2.0
        pos[n] = (x, -float(G.nodes[n].get("level", 0)))
        return x

    place(root)
    return pos


def visualize_tree(tree: BTree, title: str = "B-Tree", out: Optional[Path] = None,
                   highlight: Optional[Iterable[int]] = None):
    """
    Dibuja el árbol. Los nodos que contienen alguna clave de `highlight` se pintan en rojo.
    Si `out` se indica guarda la figura (png) y devuelve su Path; si no, plt.show().
    """
    G = tree_to_networkx(tree)
    pos = hierarchy_pos(G, root=0)
    wanted = set(highlight or [])
    colors = ["red" if wanted.intersection(G.nodes[n]["keys"]) else "lightblue" for n in G.nodes]

    width = max(6, 1.2 * sum(1 for n in G.nodes if G.nodes[n]["leaf"]))
    plt.figure(figsize=(width, 2 + 1.5 * tree.height()))
    nx.draw_networkx_edges(G, pos, arrows=False, width=1.0, alpha=0.7)
    nx.draw_networkx_nodes(G, pos, node_shape="s", node_size=900, node_color=colors)
    nx.draw_networkx_labels(G, pos, labels=nx.get_node_attributes(G, "label"), font_size=8)

    plt.title(title)
    plt.axis("off")
    if out is not None:
        out_p = Path(out)
        out_p.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(out_p, bbox_inches="tight")
        plt.close()
        return out_p
    plt.show()
    return None
