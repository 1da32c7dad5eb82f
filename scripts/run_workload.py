# scripts/run_workload.py
"""
Ejecuta una carga aleatoria sobre el B-Tree y guarda resultados legibles.
Uso (ejemplo):
  python scripts/run_workload.py --max-keys 4 --inserts 500 --deletes 100 --searches 200 --seed 0 --out results/run1

Salida en --out:
  summary.json  (altura final, nodos, claves, borrados)
  trace.csv     (altura / nodos / claves después de cada operación)
  levels.csv    (estadísticas por nivel del árbol final)
"""
from pathlib import Path
import argparse
import json
import sys

try:
    from btree_index.sim.workload import WorkloadSimulator
    from btree_index.utils import save_level_report, save_trace
except ImportError:
    print("ERROR: no se pudo importar btree_index. Instala el paquete (pip install -e .) o ejecuta desde la raíz.")
    raise


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    p = argparse.ArgumentParser(description="Run a random B-Tree workload and export readable results")
    p.add_argument("--max-keys", "-m", type=int, default=3, help="Máximo de claves por nodo")
    p.add_argument("--inserts", "-i", type=int, default=200)
    p.add_argument("--deletes", "-d", type=int, default=50)
    p.add_argument("--searches", "-s", type=int, default=100)
    p.add_argument("--key-space", "-k", type=int, default=10000)
    p.add_argument("--seed", type=int, default=None, help="Semilla aleatoria para reproducibilidad (numpy)")
    p.add_argument("--out", "-o", default="results/workload", help="Directorio de salida para resultados")
    args = p.parse_args(argv)

    if args.max_keys < 2:
        print("ERROR: --max-keys debe ser >= 2")
        return 1

    sim = WorkloadSimulator(max_keys=args.max_keys, seed=args.seed)
    print("Ejecutando carga (inserts=%s deletes=%s searches=%s) ..." % (args.inserts, args.deletes, args.searches))
    try:
        res = sim.run(args.inserts, n_deletes=args.deletes, key_space=args.key_space, n_searches=args.searches)
    except ValueError as ex:
        print("ERROR durante la ejecución de la carga:", ex)
        return 1

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    summary = {
        "max_keys": args.max_keys,
        "seed": args.seed,
        "final_height": res["final_height"],
        "final_nodes": res["final_nodes"],
        "total_keys": res["total_keys"],
        "deleted": res["deleted"],
        "unsupported_deletes": res["unsupported_deletes"],
        "search_hits": res["search_hits"],
    }
    with open(out_dir / "summary.json", "w", encoding="utf-8") as fh:
        json.dump(summary, fh, indent=2, ensure_ascii=False)

    save_trace(res, out_dir)
    save_level_report(sim.tree, out_dir)

    print("Resultados guardados en:", out_dir)
    print("Resumen:", summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
