# src/btree_index/db/btree.py
"""
B-Tree en memoria con claves enteras.

- BTreeNode: claves ordenadas, hijos opcionales y flag de hoja. Implementa búsqueda,
  inserción en nodo no lleno, split de hijo y borrado simplificado.
- SearchResult: (node, index, found) devuelto por search.
- BTree: dueño de la raíz; crece en altura al insertar con la raíz llena y se encoge
  cuando tras un borrado la raíz interna queda sin claves.

El borrado solo soporta claves que viven en hojas. No hay redistribución ni merge.
"""
import logging
from collections import namedtuple
from enum import Enum, auto
from typing import List

log = logging.getLogger(__name__)

SearchResult = namedtuple("SearchResult", ["node", "index", "found"])

NOT_FOUND = SearchResult(None, -1, False)


class DeleteResult(Enum):
    Success = auto()
    NotFound = auto()
    InternalKey = auto()


class BTreeNode:
    def __init__(self, leaf: bool = True, max_keys: int = 3):
        self.leaf = leaf
        self.max_keys = max_keys
        self.keys: List[int] = []
        self.children: List["BTreeNode"] = []

    def __repr__(self):
        return f"BTreeNode(keys={self.keys}, leaf={self.leaf})"

    def is_full(self) -> bool:
        return len(self.keys) == self.max_keys

    def _lower_bound(self, key: int) -> int:
        # primer índice i con keys[i] >= key
        i = 0
        while i < len(self.keys) and key > self.keys[i]:
            i += 1
        return i

    def search(self, key: int) -> SearchResult:
        i = self._lower_bound(key)
        if i < len(self.keys) and self.keys[i] == key:
            return SearchResult(self, i, True)
        if self.leaf:
            return NOT_FOUND
        return self.children[i].search(key)

    def insert_non_full(self, key: int) -> None:
        """
        Inserta key asumiendo que este nodo NO está lleno (lo garantiza BTree.insert).
        En nodos internos se hace split preventivo del hijo destino si está lleno,
        así nunca se baja a un nodo sin espacio.
        """
        i = len(self.keys) - 1

        if self.leaf:
            # hueco al final y desplazamos a la derecha las claves mayores
            self.keys.append(key)
            while i >= 0 and self.keys[i] > key:
                self.keys[i + 1] = self.keys[i]
                i -= 1
            self.keys[i + 1] = key
            return

        while i >= 0 and self.keys[i] > key:
            i -= 1
        i += 1

        if self.children[i].is_full():
            self.split_child(i)
            # la clave promovida quedó en keys[i]; si es menor, key va al nuevo hermano
            if self.keys[i] < key:
                i += 1

        self.children[i].insert_non_full(key)

    def split_child(self, i: int) -> None:
        """
        Divide children[i] (lleno) en dos y promueve su clave central a este nodo.

        mid = max_keys // 2. El hijo original conserva keys[:mid], el nuevo hermano recibe
        keys[mid+1:] (max_keys - mid - 1 claves) y keys[mid] sube a self.keys[i].
        Con max_keys par el reparto es asimétrico (el hermano derecho queda más corto).
        """
        full_child = self.children[i]
        sibling = BTreeNode(leaf=full_child.leaf, max_keys=self.max_keys)

        mid = self.max_keys // 2

        sibling.keys = full_child.keys[mid + 1:]
        if not full_child.leaf:
            sibling.children = full_child.children[mid + 1:]

        self.children.insert(i + 1, sibling)
        self.keys.insert(i, full_child.keys[mid])

        full_child.keys = full_child.keys[:mid]
        if not full_child.leaf:
            full_child.children = full_child.children[:mid + 1]

        log.debug(f"split child {i}: left={full_child.keys} promoted={self.keys[i]} right={sibling.keys}")

    def delete(self, key: int) -> bool:
        """
        Borrado simplificado:
          - clave en hoja: se elimina directamente (sin rebalanceo, el nodo puede quedar
            por debajo de cualquier ocupación mínima).
          - clave en nodo interno: no soportado, devuelve False sin modificar el árbol.
          - clave ausente: False.
        """
        i = self._lower_bound(key)

        if i < len(self.keys) and self.keys[i] == key:
            if self.leaf:
                del self.keys[i]
                return True
            log.warning(f"delete({key}): key lives in an internal node; deletion from internal nodes is not supported")
            return False

        if self.leaf:
            return False

        return self.children[i].delete(key)


class BTree:
    """B-Tree de enteros. API: insert(key), search(key), delete(key), height(), count_nodes()."""

    def __init__(self, max_keys: int = 3):
        # sin validación de max_keys: con max_keys < 2 el split degenera
        self.root = BTreeNode(leaf=True, max_keys=max_keys)
        self.max_keys = max_keys

    def search(self, key: int) -> SearchResult:
        return self.root.search(key)

    def insert(self, key: int) -> None:
        if self.root.search(key).found:
            log.debug(f"insert({key}): duplicate key ignored")
            return

        if self.root.is_full():
            new_root = BTreeNode(leaf=False, max_keys=self.max_keys)
            new_root.children.append(self.root)
            new_root.split_child(0)
            self.root = new_root
            log.debug(f"root split, new root keys={new_root.keys}")

        self.root.insert_non_full(key)

    def delete(self, key: int) -> bool:
        deleted = self.root.delete(key)

        if not self.root.leaf and not self.root.keys:
            self.root = self.root.children[0]
            log.debug("root emptied, height shrinks by one")

        return deleted

    def delete_status(self, key: int) -> DeleteResult:
        """
        Clasifica, sin modificar el árbol, lo que haría delete(key).
        Sirve para distinguir "no existe" de "existe pero está en un nodo interno".
        """
        result = self.root.search(key)
        if not result.found:
            return DeleteResult.NotFound
        if result.node.leaf:
            return DeleteResult.Success
        return DeleteResult.InternalKey

    def height(self) -> int:
        # todas las hojas están a la misma profundidad, basta bajar por children[0]
        node = self.root
        h = 1
        while not node.leaf:
            node = node.children[0]
            h += 1
        return h

    def count_nodes(self) -> int:
        return self._count_nodes(self.root)

    def _count_nodes(self, node: BTreeNode) -> int:
        count = 1
        if not node.leaf:
            for child in node.children:
                count += self._count_nodes(child)
        return count

    def traverse_keys(self) -> List[int]:
        """Recorrido in-order: todas las claves en orden ascendente."""
        res: List[int] = []
        self._traverse(self.root, res)
        return res

    def _traverse(self, node: BTreeNode, res: List[int]) -> None:
        if node.leaf:
            res.extend(node.keys)
            return
        for i, k in enumerate(node.keys):
            self._traverse(node.children[i], res)
            res.append(k)
        self._traverse(node.children[-1], res)

    def __len__(self):
        return len(self.traverse_keys())
