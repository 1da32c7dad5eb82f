# src/btree_index/sim/workload.py
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from btree_index.db.btree import BTree, DeleteResult


class WorkloadSimulator:
    """
    Simulador de carga sobre un BTree:
    - inserta n claves distintas muestreadas de [0, key_space)
    - intenta borrar claves ya insertadas (solo las de hojas se borran de verdad)
    - hace búsquedas aleatorias
    El árbol se conserva entre llamadas a run(); la traza (steps) es la de la última llamada.
    Después de cada operación registra altura, número de nodos y número de claves.
    """

    def __init__(self, max_keys: int = 3, seed: Optional[int] = None):
        self.tree = BTree(max_keys=max_keys)
        self.rng = np.random.default_rng(seed)
        self.steps: List[Dict[str, Any]] = []
        self._n_keys = 0

    def _record(self, op: str, key: int, result: Any) -> None:
        self.steps.append({
            "step": len(self.steps),
            "op": op,
            "key": key,
            "result": result,
            "height": self.tree.height(),
            "nodes": self.tree.count_nodes(),
            "keys": self._n_keys,
        })

    def run(self, n_inserts: int, n_deletes: int = 0, key_space: int = 1000, n_searches: int = 0) -> Dict[str, Any]:
        """
        Ejecuta la carga y devuelve un dict con métricas, la lista de pasos y la traza
        como DataFrame.
        """
        if n_inserts > key_space:
            raise ValueError(f"cannot draw {n_inserts} distinct keys from a key space of {key_space}")

        # la traza es por llamada; el árbol y el contador de claves se conservan entre llamadas
        self.steps = []

        inserted = [int(k) for k in self.rng.choice(key_space, size=n_inserts, replace=False)]
        for key in inserted:
            is_new = not self.tree.search(key).found
            self.tree.insert(key)
            if is_new:
                self._n_keys += 1
            self._record("insert", key, is_new)

        deleted = 0
        unsupported = 0
        if n_deletes and inserted:
            idx = self.rng.choice(len(inserted), size=min(n_deletes, len(inserted)), replace=False)
            for i in idx:
                key = inserted[int(i)]
                status = self.tree.delete_status(key)
                ok = self.tree.delete(key)
                if ok:
                    deleted += 1
                    self._n_keys -= 1
                elif status == DeleteResult.InternalKey:
                    unsupported += 1
                self._record("delete", key, ok)

        hits = 0
        for key in self.rng.integers(0, key_space, size=n_searches):
            found = self.tree.search(int(key)).found
            hits += int(found)
            self._record("search", int(key), found)

        return {
            "steps": self.steps,
            "trace": pd.DataFrame(self.steps, columns=["step", "op", "key", "result", "height", "nodes", "keys"]),
            "final_height": self.tree.height(),
            "final_nodes": self.tree.count_nodes(),
            "total_keys": self._n_keys,
            "deleted": deleted,
            "unsupported_deletes": unsupported,
            "search_hits": hits,
        }
