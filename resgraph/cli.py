"""
Command line front end.

    resgraph propagate graph.json --pin a=1 --pin e=0 --iterations 500
    resgraph layout graph.json --ticks 300 --preset clamped
"""

import argparse
import json
import logging
import math
import sys

from .config import DEGENERATE_NAN, DEGENERATE_RAISE, PRESETS, get_preset
from .errors import GraphError
from .loader import load_graph, parse_number
from .relaxation import RelaxationEngine

logger = logging.getLogger(__name__)


def _assignment(text):
    node_id, sep, value = text.partition("=")
    if not sep or not node_id:
        raise argparse.ArgumentTypeError(f"expected ID=VALUE, got {text!r}")
    try:
        return node_id, parse_number(value, node_id, 0.0)
    except GraphError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _count(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a whole number, got {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog="resgraph",
        description="Resistance propagation and distance relaxation on JSON graphs",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    prop = sub.add_parser("propagate", help="spread pinned values over the graph")
    prop.add_argument("graph", help="JSON graph record")
    prop.add_argument("--pin", type=_assignment, action="append", default=[], metavar="ID=VALUE",
                      help="terminal node and its fixed value (repeatable)")
    prop.add_argument("--seed", type=_assignment, action="append", default=[], metavar="ID=VALUE",
                      help="starting value for a free node (repeatable)")
    prop.add_argument("--iterations", type=_count, default=100)
    prop.add_argument("--nan", action="store_true",
                      help="let isolated free nodes become NaN instead of failing")

    lay = sub.add_parser("layout", help="run relaxation ticks and print positions")
    lay.add_argument("graph", help="JSON graph record")
    lay.add_argument("--ticks", type=_count, default=300)
    lay.add_argument("--preset", choices=sorted(PRESETS), default="clamped")
    lay.add_argument("--seed", type=int, default=None, help="random seed for initial placement")
    return parser


def run_propagate(args):
    model = load_graph(args.graph)
    for node_id, value in args.seed:
        model.set_resistance(node_id, value)
    for node_id, value in args.pin:
        model.set_value(node_id, value)
    policy = DEGENERATE_NAN if args.nan else DEGENERATE_RAISE
    delta = model.propagate(args.iterations, policy)
    logger.info("last round changed values by at most %.3g", delta)
    # NaN is not valid JSON
    return {k: (None if math.isnan(v) else v) for k, v in model.values().items()}


def run_layout(args):
    config = get_preset(args.preset)
    model = load_graph(args.graph, config)
    engine = RelaxationEngine(config, seed=args.seed)
    # the first tick only seeds positions
    for _ in range(args.ticks + 1):
        engine.step(model)
    logger.info("stress after %d ticks: %.3f", engine.ticks, engine.stress(model))
    return {k: {"x": x, "y": y} for k, (x, y) in model.positions().items()}


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "propagate":
            result = run_propagate(args)
        else:
            result = run_layout(args)
    except (GraphError, OSError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2))
    return 0
