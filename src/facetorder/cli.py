"""facetorder command-line interface."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Optional, Sequence

from .io import load_edge_fan, load_graph, save_json
from .kernels import DEFAULT_KERNEL, KERNELS
from .models import InvalidArgumentError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Order faces around a mesh edge")
    parser.add_argument("--debug", action="store_true", help="Log ordering trace to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Check an edge-fan payload")
    validate.add_argument("--in", dest="input_path", required=True)

    order = sub.add_parser("order", help="Order the faces around an edge")
    order.add_argument("--in", dest="input_path", required=True)
    order.add_argument("--pivot", type=float, nargs=3, metavar=("X", "Y", "Z"))
    order.add_argument("--kernel", choices=sorted(KERNELS), default=DEFAULT_KERNEL)
    order.add_argument("--report", dest="report_path")

    path = sub.add_parser("path", help="Shortest path to the nearest target vertex")
    path.add_argument("--in", dest="input_path", required=True)
    path.add_argument("--source", type=int, required=True)
    path.add_argument("--target", type=int, action="append", required=True)
    path.add_argument("--euclidean", action="store_true")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        if args.command == "validate":
            _cmd_validate(args)
        elif args.command == "order":
            _cmd_order(args)
        elif args.command == "path":
            _cmd_path(args)
    except InvalidArgumentError as exc:
        print(f"error: {exc}")
        raise SystemExit(1)


def _load_fan(path: str):
    try:
        return load_edge_fan(path)
    except KeyError as exc:
        print(f"error: {path}: missing key {exc}")
        raise SystemExit(1)
    except (TypeError, ValueError) as exc:
        print(f"error: {path}: {exc}")
        raise SystemExit(1)


def _cmd_validate(args) -> None:
    fan = _load_fan(args.input_path)
    errors = fan.validate()
    if errors:
        for error in errors:
            print(error)
        raise SystemExit(1)
    print("OK")


def _cmd_order(args) -> None:
    from .ordering import order_facets_around_edge

    fan = _load_fan(args.input_path)
    pivot = args.pivot if args.pivot is not None else fan.pivot_point
    order = order_facets_around_edge(
        fan.vertices,
        fan.faces,
        fan.s,
        fan.d,
        fan.adj_faces,
        pivot_point=pivot,
        kernel=args.kernel,
        debug=args.debug,
    )
    if args.report_path:
        from .diagnostics import ordering_report

        report = ordering_report(
            fan.vertices, fan.faces, fan.s, fan.d, fan.adj_faces,
            pivot_point=pivot, kernel=args.kernel,
        )
        save_json(report, args.report_path)
    print(json.dumps(order))


def _cmd_path(args) -> None:
    from .dijkstra import dijkstra, dijkstra_euclidean, dijkstra_path

    graph = load_graph(args.input_path)
    try:
        if args.euclidean:
            if graph["vertices"] is None:
                raise ValueError("--euclidean needs 'vertices' in the input")
            reached, distance, previous = dijkstra_euclidean(
                graph["vertices"], graph["adjacency"], args.source, args.target
            )
        else:
            reached, distance, previous = dijkstra(
                args.source, args.target, graph["adjacency"], graph["weights"]
            )
    except ValueError as exc:
        print(f"error: {exc}")
        raise SystemExit(1)

    if reached == -1:
        print(json.dumps({"reached": -1, "distance": None, "path": []}))
        return
    path = list(reversed(dijkstra_path(reached, previous)))
    print(json.dumps({"reached": reached, "distance": float(distance[reached]), "path": path}))


if __name__ == "__main__":
    main()
