# src/btree_index/analysis/walks.py
"""
Recorridos "cliente" sobre el B-Tree (solo usan tree.root y los nodos):
- in_order / range_query
- keys_per_level / level_report (pandas)
- validadores de invariantes (orden, capacidad, balance)
"""
from collections import deque
from typing import Iterator, List

import pandas as pd

from btree_index.db.btree import BTree, BTreeNode

# -------------------------
# RECORRIDOS
# -------------------------
def in_order(node: BTreeNode) -> Iterator[int]:
    if node.leaf:
        yield from node.keys
        return
    for i, k in enumerate(node.keys):
        yield from in_order(node.children[i])
        yield k
    yield from in_order(node.children[-1])


def range_query(tree: BTree, low: int, high: int) -> List[int]:
    """
    Claves k con low <= k <= high, en orden ascendente.
    Recorre hijo i, luego clave i, y al final el último hijo (mismo orden que la demo).
    """
    if low > high:
        raise ValueError(f"invalid range: low ({low}) > high ({high})")
    out: List[int] = []
    _range_walk(tree.root, low, high, out)
    return out


def _range_walk(node: BTreeNode, low: int, high: int, out: List[int]) -> None:
    for i, key in enumerate(node.keys):
        if not node.leaf and i < len(node.children):
            _range_walk(node.children[i], low, high, out)
        if low <= key <= high:
            out.append(key)
    if not node.leaf and len(node.children) > len(node.keys):
        _range_walk(node.children[-1], low, high, out)


# -------------------------
# ANÁLISIS POR NIVELES
# -------------------------
def keys_per_level(tree: BTree) -> List[int]:
    """Número de claves del primer nodo de cada nivel (bajando por children[0])."""
    counts = []
    node = tree.root
    while True:
        counts.append(len(node.keys))
        if node.leaf:
            break
        node = node.children[0]
    return counts


def level_report(tree: BTree) -> pd.DataFrame:
    """
    Estadísticas por nivel (BFS): level, nodes, keys, min_keys, max_keys,
    first_node_keys, fill_ratio = keys / (nodes * max_keys).
    """
    levels = {}
    queue = deque([(tree.root, 0)])
    while queue:
        node, level = queue.popleft()
        levels.setdefault(level, []).append(len(node.keys))
        if not node.leaf:
            for child in node.children:
                queue.append((child, level + 1))

    rows = []
    for level in sorted(levels):
        sizes = levels[level]
        capacity = len(sizes) * tree.max_keys
        rows.append({
            "level": level,
            "nodes": len(sizes),
            "keys": sum(sizes),
            "min_keys": min(sizes),
            "max_keys": max(sizes),
            "first_node_keys": sizes[0],
            "fill_ratio": sum(sizes) / capacity if capacity else 0.0,
        })
    return pd.DataFrame(rows, columns=["level", "nodes", "keys", "min_keys", "max_keys",
                                       "first_node_keys", "fill_ratio"])


# -------------------------
# VALIDADORES
# -------------------------
def validate_ordering(tree: BTree) -> bool:
    """
    Cada nodo debe tener claves estrictamente crecientes y dentro de los límites
    que imponen las claves separadoras de sus ancestros.
    Lanza AssertionError en el primer fallo. Usa assert: con python -O no se
    comprueba nada y siempre devuelve True.
    """
    stack = [(tree.root, float("-inf"), float("inf"))]
    while stack:
        node, lower, upper = stack.pop()
        for i, key in enumerate(node.keys):
            assert lower < key < upper, (
                f"validation: key [{key}] outside bounds ({lower}, {upper}) in node {node.keys}"
            )
            if i > 0:
                assert key > node.keys[i - 1], (
                    f"validation: keys must be strictly ascending, got {node.keys}"
                )
        if not node.leaf:
            bounds = [lower] + node.keys + [upper]
            for i, child in enumerate(node.children):
                stack.append((child, bounds[i], bounds[i + 1]))
    return True


def validate_capacity(tree: BTree) -> bool:
    stack = [tree.root]
    while stack:
        node = stack.pop()
        assert len(node.keys) <= tree.max_keys, (
            f"validation: node {node.keys} holds more than {tree.max_keys} keys"
        )
        if not node.leaf:
            assert len(node.children) == len(node.keys) + 1, (
                f"validation: internal node {node.keys} has {len(node.children)} children"
            )
            stack.extend(node.children)
    return True


def validate_balance(tree: BTree) -> bool:
    """Todas las hojas a profundidad height() - 1."""
    expected = tree.height() - 1
    stack = [(tree.root, 0)]
    while stack:
        node, depth = stack.pop()
        if node.leaf:
            assert depth == expected, (
                f"validation: leaf {node.keys} at depth {depth}, expected {expected}"
            )
        else:
            stack.extend((child, depth + 1) for child in node.children)
    return True


def validate(tree: BTree) -> bool:
    """Capacidad, orden y balance. Basado en assert (desactivado con python -O)."""
    validate_capacity(tree)
    validate_ordering(tree)
    validate_balance(tree)
    return True
