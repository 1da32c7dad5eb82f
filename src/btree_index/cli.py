# src/btree_index/cli.py
import argparse
import json
import logging
import sys
from pathlib import Path

from btree_index.db.btree import BTree, DeleteResult
from btree_index.analysis.walks import keys_per_level, range_query
from btree_index.sim.workload import WorkloadSimulator
from btree_index.utils import read_keys_file, save_level_report, save_trace
from btree_index.viz.visualizer import format_tree, print_tree, visualize_tree

DEFAULT_MAX_KEYS = 3
DEMO_KEYS = (10, 20, 5, 6, 12, 30, 7, 17, 25, 40, 50, 60)
DEMO_SEARCH_KEYS = (6, 15, 20, 25, 100)
DEMO_RANGE = (15, 35)


def config_logging(verbose: bool = False):
    FORMAT = "[%(filename)s:%(lineno)s - %(funcName)s ] %(message)s"
    logging.basicConfig(format=FORMAT, level=logging.DEBUG if verbose else logging.WARNING)


def max_keys_arg(value: str) -> int:
    n = int(value)
    if n < 2:
        raise argparse.ArgumentTypeError("max-keys must be >= 2")
    return n


def print_stats(tree: BTree):
    print("Tree height: " + str(tree.height()) + ", Total nodes: " + str(tree.count_nodes()))


def print_search(tree: BTree, key: int):
    result = tree.search(key)
    if result.found:
        print(f"Key {key} found at position {result.index} in node with keys {result.node.keys}")
    else:
        print(f"Key {key} not found")


def print_levels(tree: BTree):
    for level, n in enumerate(keys_per_level(tree)):
        print(f"Level {level}: {n} keys")


def cmd_demo(args):
    tree = BTree(args.max_keys)
    print("=== B-Tree Implementation Demo ===")
    print(f"Creating B-tree with maximum {args.max_keys} keys per node")

    for key in DEMO_KEYS:
        print(f"\n--- Inserting {key} ---")
        tree.insert(key)
        print_tree(tree)
        print_stats(tree)

    print("\n=== Search Operations ===")
    for key in DEMO_SEARCH_KEYS:
        print_search(tree, key)

    low, high = DEMO_RANGE
    print(f"\n=== Range Query Simulation ({low} to {high}) ===")
    print(" ".join(str(k) for k in range_query(tree, low, high)))

    print("\n=== Tree Analysis ===")
    print("Final tree height:", tree.height())
    print("Total nodes:", tree.count_nodes())
    print("Keys per level analysis:")
    print_levels(tree)

    if args.plot:
        out = visualize_tree(tree, title=f"B-Tree demo (max_keys={args.max_keys})", out=args.out)
        if out is not None:
            print("Figura guardada en:", out)
    return 0


def cmd_build(args):
    keys = list(args.keys or [])
    if args.keys_file:
        try:
            keys.extend(read_keys_file(args.keys_file))
        except (FileNotFoundError, ValueError) as e:
            print("ERROR:", e)
            return 1

    tree = BTree(args.max_keys)
    for key in keys:
        tree.insert(key)

    for key in args.delete or []:
        status = tree.delete_status(key)
        ok = tree.delete(key)
        if ok:
            print(f"delete {key}: deleted")
        elif status == DeleteResult.InternalKey:
            print(f"delete {key}: unsupported (internal node)")
        else:
            print(f"delete {key}: not found")

    print(format_tree(tree))
    print_stats(tree)

    if args.range:
        low, high = args.range
        try:
            print(f"Range [{low}, {high}]:", range_query(tree, low, high))
        except ValueError as e:
            print("ERROR:", e)
            return 1

    if args.levels_csv:
        out_file = save_level_report(tree, args.levels_csv)
        print("Reporte por niveles guardado en:", out_file)

    if args.plot:
        out = visualize_tree(tree, title=f"B-Tree (max_keys={args.max_keys})", out=args.out)
        if out is not None:
            print("Figura guardada en:", out)
    return 0


def cmd_simulate(args):
    sim = WorkloadSimulator(max_keys=args.max_keys, seed=args.seed)
    try:
        res = sim.run(args.inserts, n_deletes=args.deletes, key_space=args.key_space, n_searches=args.searches)
    except ValueError as e:
        print("ERROR:", e)
        return 1

    summary = {
        "max_keys": args.max_keys,
        "final_height": res["final_height"],
        "final_nodes": res["final_nodes"],
        "total_keys": res["total_keys"],
        "deleted": res["deleted"],
        "unsupported_deletes": res["unsupported_deletes"],
        "search_hits": res["search_hits"],
    }
    print("=== RESULTADO ===")
    for k, v in summary.items():
        print(f"{k}: {v}")

    if args.out:
        out_dir = Path(args.out)
        out_dir.mkdir(parents=True, exist_ok=True)
        with open(out_dir / "summary.json", "w", encoding="utf-8") as fh:
            json.dump(summary, fh, indent=2)
        save_trace(res, out_dir)
        print("Resultados guardados en:", out_dir)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="btree-index")
    p.add_argument("--verbose", "-v", action="store_true", help="Logging DEBUG (splits, crecimiento de la raíz)")
    sub = p.add_subparsers(dest="cmd", required=True)

    pd_ = sub.add_parser("demo", help="Demo guiada: inserciones, búsquedas, rango y niveles")
    pd_.add_argument("--max-keys", type=max_keys_arg, default=DEFAULT_MAX_KEYS)
    pd_.add_argument("--plot", action="store_true", help="Dibujar el árbol final")
    pd_.add_argument("--out", help="PNG de salida para --plot (si no, ventana interactiva)")

    pb = sub.add_parser("build", help="Construir un árbol a partir de claves")
    pb.add_argument("--keys", type=int, nargs="+", help="Claves a insertar")
    pb.add_argument("--keys-file", help="Archivo con claves (espacios o comas)")
    pb.add_argument("--max-keys", type=max_keys_arg, default=DEFAULT_MAX_KEYS)
    pb.add_argument("--delete", type=int, nargs="+", help="Claves a borrar después de insertar")
    pb.add_argument("--range", type=int, nargs=2, metavar=("LO", "HI"), help="Consulta de rango")
    pb.add_argument("--levels-csv", help="Carpeta donde guardar levels.csv")
    pb.add_argument("--plot", action="store_true")
    pb.add_argument("--out", help="PNG de salida para --plot")

    ps = sub.add_parser("simulate", help="Carga aleatoria de inserts/deletes/searches")
    ps.add_argument("--max-keys", type=max_keys_arg, default=DEFAULT_MAX_KEYS)
    ps.add_argument("--inserts", type=int, default=100)
    ps.add_argument("--deletes", type=int, default=0)
    ps.add_argument("--searches", type=int, default=0)
    ps.add_argument("--key-space", type=int, default=1000)
    ps.add_argument("--seed", type=int, default=None, help="Semilla para reproducibilidad")
    ps.add_argument("--out", help="Carpeta de salida (summary.json, trace.csv)")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config_logging(args.verbose)

    if args.cmd == "demo":
        return cmd_demo(args)
    if args.cmd == "build":
        return cmd_build(args)
    if args.cmd == "simulate":
        return cmd_simulate(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
