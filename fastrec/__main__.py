"""
FastRec CLI Entrypoint

Commands:
    fastrec stats <prefs.tsv>        Print preference store statistics as JSON
    fastrec neighbors <prefs.tsv>    Print top-k neighborhoods as TSV
                                     (raw_id, neighbor_raw_id, score)

Input files hold ``user \\t item [\\t weight]`` lines. Identifiers are indexed
in first-seen order.

Environment defaults (flags win):
    FASTREC_METRIC, FASTREC_STRATEGY, FASTREC_VECTORIZED, FASTREC_K,
    FASTREC_THRESHOLD, FASTREC_MAX_WORKERS, FASTREC_LOG_LEVEL, FASTREC_LOG_JSON
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from typing import List, Optional, Sequence, TextIO

from fastrec import __version__
from fastrec.core.config import (
    LoggingConfig,
    NeighborhoodConfig,
    SimilarityConfig,
    ensure_valid,
)
from fastrec.core.errors import FastRecError
from fastrec.core.types import CounterStrategy, Orientation
from fastrec.data.index import SimpleIndex
from fastrec.neighborhood import InvertedNeighborhood, from_config
from fastrec.observability.logging import LogLevel, get_logger, setup_logging
from fastrec.preference.store import PreferenceStore
from fastrec.similarity import METRICS, SetSimilarity

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fastrec",
        description="Neighborhood-based collaborative filtering core",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.name for level in LogLevel],
        default=None,
        help="Log level (default: FASTREC_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Print store statistics")
    stats_parser.add_argument("path", help="Tab-separated preference file")

    # neighbors command
    nb_parser = subparsers.add_parser("neighbors", help="Print neighborhoods")
    nb_parser.add_argument("path", help="Tab-separated preference file")
    nb_parser.add_argument(
        "--metric",
        choices=sorted([*METRICS, "asymmetric_cosine"]),
        default=None,
        help="Similarity metric (default: FASTREC_METRIC or jaccard)",
    )
    nb_parser.add_argument(
        "--alpha",
        type=float,
        default=None,
        help="Exponent for asymmetric_cosine (default: 0.5)",
    )
    nb_parser.add_argument(
        "--strategy",
        choices=[s.value for s in CounterStrategy],
        default=None,
        help="Co-occurrence counter (default: FASTREC_STRATEGY or sparse)",
    )
    nb_parser.add_argument(
        "--vectorized",
        action="store_true",
        help="Count with numpy over the compiled index arrays",
    )
    nb_parser.add_argument(
        "--k",
        type=int,
        default=None,
        help="Neighbors per element, 0 for all (default: FASTREC_K or 100)",
    )
    nb_parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Keep only scores strictly above this value",
    )
    nb_parser.add_argument(
        "--item",
        action="store_true",
        help="Item-item neighborhoods instead of user-user",
    )
    nb_parser.add_argument(
        "--inverted",
        action="store_true",
        help="Print the inverted neighborhood (who lists each element)",
    )
    nb_parser.add_argument(
        "--id",
        dest="raw_id",
        default=None,
        help="Only print the neighborhood of this raw identifier",
    )
    nb_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads for the inverted build (default: FASTREC_MAX_WORKERS)",
    )
    return parser


def _load_store(path: str) -> PreferenceStore:
    users = SimpleIndex.from_tsv(path, 0)
    items = SimpleIndex.from_tsv(path, 1)
    return PreferenceStore.load(path, users, items)


def _run_stats(args: argparse.Namespace, out: TextIO) -> int:
    store = _load_store(args.path)
    json.dump(store.stats(), out, indent=2, sort_keys=True)
    out.write("\n")
    return 0


def _similarity_config(args: argparse.Namespace) -> SimilarityConfig:
    config = SimilarityConfig.from_env()
    overrides = {}
    if args.metric is not None:
        overrides["metric"] = args.metric
    if args.alpha is not None:
        overrides["alpha"] = args.alpha
    if args.strategy is not None:
        overrides["strategy"] = CounterStrategy(args.strategy)
    if args.vectorized:
        overrides["vectorized"] = True
    if args.item:
        overrides["orientation"] = Orientation.ITEM
    return replace(config, **overrides)


def _neighborhood_config(args: argparse.Namespace) -> NeighborhoodConfig:
    config = NeighborhoodConfig.from_env()
    overrides = {}
    if args.k is not None:
        overrides["k"] = args.k
    if args.threshold is not None:
        overrides["threshold"] = args.threshold
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    return replace(config, **overrides)


def _run_neighbors(args: argparse.Namespace, out: TextIO) -> int:
    sim_config = _similarity_config(args)
    nb_config = _neighborhood_config(args)
    ensure_valid(sim_config)
    ensure_valid(nb_config)

    store = _load_store(args.path)
    index = store.item_index if sim_config.orientation is Orientation.ITEM else store.user_index
    similarity = SetSimilarity.from_config(store, sim_config)
    source = from_config(similarity, nb_config)

    n = similarity.num_elements
    targets: Sequence[int] = range(n)
    if args.raw_id is not None:
        idx = index.get_index(args.raw_id)
        if idx < 0:
            print(f"Unknown identifier: {args.raw_id}", file=sys.stderr)
            return 1
        targets = [idx]

    if args.inverted:
        wanted = set(targets)
        source = InvertedNeighborhood.build(
            n, source,
            filter=wanted.__contains__,
            max_workers=nb_config.max_workers,
            window=nb_config.window,
        )

    lines = 0
    for idx in targets:
        raw_id = index.get_id(idx)
        for nb in source.neighbors(idx):
            out.write(f"{raw_id}\t{index.get_id(nb.idx)}\t{nb.score}\n")
            lines += 1
    logger.debug("Neighborhoods written", elements=len(targets), lines=lines)
    return 0


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    """Main CLI entrypoint. Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    out = out or sys.stdout

    log_config = LoggingConfig.from_env()
    if args.log_level is not None:
        log_config = replace(log_config, level=args.log_level)
    try:
        ensure_valid(log_config)
    except FastRecError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 2
    setup_logging(LogLevel.from_name(log_config.level), log_config.json_output)

    try:
        if args.command == "stats":
            return _run_stats(args, out)
        if args.command == "neighbors":
            return _run_neighbors(args, out)
    except FastRecError as err:
        logger.error("Command failed", command=args.command, error=err.to_dict())
        print(f"Error: {err}", file=sys.stderr)
        return 1
    except OSError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    parser.print_help(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
