import re
from pathlib import Path
from typing import Any, Dict, List

from btree_index.analysis.walks import level_report


def read_keys_file(path) -> List[int]:
    """
    Lee claves enteras separadas por espacios o comas.
    Ignora líneas vacías y comentarios (#).
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"No se encontró el archivo de claves {p}")
    keys: List[int] = []
    with open(p, encoding="utf-8") as fh:
        for line in fh:
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            keys.extend(int(tok) for tok in re.split(r"[,\s]+", line) if tok)
    return keys


def save_level_report(tree, out_dir, filename: str = "levels.csv") -> Path:
    """Guarda level_report(tree) como CSV en out_dir. Retorna la Path del archivo."""
    out_p = Path(out_dir)
    out_p.mkdir(parents=True, exist_ok=True)
    out_file = out_p / filename
    level_report(tree).to_csv(out_file, index=False)
    return out_file


def save_trace(sim_result: Dict[str, Any], out_dir, filename: str = "trace.csv") -> Path:
    """
    Guarda la traza por paso del WorkloadSimulator.

    Args:
      sim_result: resultado de WorkloadSimulator.run(), debe contener "trace" (DataFrame).
      out_dir: carpeta de salida (Path o str).
      filename: nombre del CSV.
    """
    out_p = Path(out_dir)
    out_p.mkdir(parents=True, exist_ok=True)
    out_file = out_p / filename
    sim_result["trace"].to_csv(out_file, index=False)
    return out_file
