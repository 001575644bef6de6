import argparse
import json
import math
import sys
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from . import __version__
from .config import METHOD_CHOICES, PIVOTING_CHOICES, SelectionConfig
from .logutil import set_verbose
from .parsers import read_values
from .percentile import drop_nans

if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console as _Console
    from rich.table import Table as _Table
else:  # runtime optional import
    try:  # noqa: SIM105
        from rich.console import Console as _Console  # type: ignore
        from rich.table import Table as _Table  # type: ignore
    except Exception:  # noqa: BLE001
        _Console = None  # type: ignore
        _Table = None  # type: ignore

ConsoleType = Optional["_Console"]


def build_config(args: argparse.Namespace) -> SelectionConfig:
    cfg = SelectionConfig()
    if getattr(args, "pivoting", None):
        cfg.pivoting = args.pivoting
    if getattr(args, "seed", None) is not None:
        cfg.seed = int(args.seed)
    if getattr(args, "method", None):
        cfg.method = args.method
    if getattr(args, "nan_policy", None):
        cfg.nan_policy = args.nan_policy
    return cfg


def _load_values(path: str) -> Optional[List[float]]:
    try:
        return read_values(path)
    except FileNotFoundError:
        print(f"[kthselect] input file not found: {path}", file=sys.stderr)
    except ValueError as exc:
        print(f"[kthselect] {path}: {exc}", file=sys.stderr)
    return None


def _maybe_console(args: argparse.Namespace) -> ConsoleType:
    if getattr(args, "no_color", False):
        return None
    if _Console is None:
        return None
    # force_terminal ensures ANSI codes even when output is being captured (for tests)
    return _Console(color_system="truecolor", stderr=False, force_terminal=True)


def cmd_select(args: argparse.Namespace) -> int:
    values = _load_values(args.file)
    if values is None:
        return 2
    cfg = build_config(args)
    selector = cfg.build_selector()
    try:
        value = selector.select(drop_nans(values, cfg.nan_policy), None, args.k)
    except (IndexError, ValueError) as exc:
        print(f"[kthselect] {exc}", file=sys.stderr)
        return 2
    print(repr(value))
    return 0


def cmd_percentile(args: argparse.Namespace) -> int:
    values = _load_values(args.file)
    if values is None:
        return 2
    estimator = build_config(args).build_percentile()
    try:
        estimator.set_data(values)
        estimates = estimator.evaluate_many(args.p)
    except ValueError as exc:
        print(f"[kthselect] {exc}", file=sys.stderr)
        return 2

    if args.json:
        selector = estimator.selector
        payload: Dict[str, Any] = {
            "n": len(estimator),
            "method": estimator.method,
            "estimates": {f"{p:g}": (None if math.isnan(v) else v) for p, v in zip(args.p, estimates)},
            "partitions": selector.partitions,
            "cache_hits": selector.cache_hits,
        }
        with open(args.json, "w", encoding="utf-8") as jf:
            json.dump(payload, jf, indent=2)
        print(f"Wrote JSON {args.json} ({len(estimates)} percentiles)")
        return 0

    console = _maybe_console(args)
    if console is not None and _Table is not None:
        table = _Table(title=f"n={len(estimator)} method={estimator.method}")
        table.add_column("percentile", style="cyan", justify="right")
        table.add_column("value", style="magenta", justify="right")
        for p, v in zip(args.p, estimates):
            table.add_row(f"p{p:g}", f"{v:.6g}")
        console.print(table)
    else:
        for p, v in zip(args.p, estimates):
            print(f"p{p:g}\t{v!r}")
    return 0


def cmd_bench(args: argparse.Namespace) -> int:
    from .bench import query_points, run, synthetic_values

    if args.size < 1:
        print("[kthselect] --size must be >= 1", file=sys.stderr)
        return 2
    if args.queries < 1:
        print("[kthselect] --queries must be >= 1", file=sys.stderr)
        return 2
    run(synthetic_values(args.size, args.seed), query_points(args.queries), max(1, args.repeats), build_config(args))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:  # pragma: no cover - integration feature
    try:
        import uvicorn
    except Exception:  # noqa: BLE001
        print("'serve' requires uvicorn. Install with `pip install kthselect[server]`.", file=sys.stderr)
        return 2
    from .service import build_app

    app = build_app(build_config(args))
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")
    return 0


def _add_selection_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--pivoting", choices=PIVOTING_CHOICES, help="Pivot choice policy (default: median_of_3)")
    parser.add_argument("--seed", type=int, help="Seed for the random pivoting policy")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kthselect", description="Order statistics and percentiles without a full sort.")
    # Global --version (argparse will exit 0 before validating subcommands)
    parser.add_argument(
        "--version",
        action="version",
        version=f"kthselect {__version__}",
        help="Show version and exit",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging on stderr")
    sub = parser.add_subparsers(dest="cmd")

    select_parser = sub.add_parser("select", help="Print the k-th smallest value (0-based) of a file of numbers")
    select_parser.add_argument("file", help="Numbers separated by whitespace/commas, or JSON arrays ('-' for stdin)")
    select_parser.add_argument("--k", type=int, required=True, help="0-based rank to select")
    select_parser.add_argument("--nan-policy", choices=["omit", "raise"], help="Drop NaN input values or fail (default: omit)")
    _add_selection_flags(select_parser)
    select_parser.set_defaults(func=cmd_select)

    pct_parser = sub.add_parser("percentile", help="Print one or more percentiles of a file of numbers")
    pct_parser.add_argument("file", help="Numbers separated by whitespace/commas, or JSON arrays ('-' for stdin)")
    pct_parser.add_argument("--p", nargs="+", type=float, default=[50.0], help="Percentiles in [0, 100] (e.g. 50 90 99)")
    pct_parser.add_argument("--method", choices=METHOD_CHOICES, help="Interpolation method (default: linear)")
    pct_parser.add_argument("--nan-policy", choices=["omit", "raise"], help="Drop NaN input values or fail (default: omit)")
    pct_parser.add_argument("--json", help="Write JSON results to this path")
    pct_parser.add_argument("--no-color", action="store_true", help="Disable rich table output even if rich present")
    _add_selection_flags(pct_parser)
    pct_parser.set_defaults(func=cmd_percentile)

    bench_parser = sub.add_parser("bench", help="Compare sorting against cached selection on synthetic data")
    bench_parser.add_argument("--size", type=int, default=100000, help="Synthetic values to generate")
    bench_parser.add_argument("--queries", type=int, default=5, help="Percentiles per batch")
    bench_parser.add_argument("--repeats", type=int, default=5, help="Batches to time")
    bench_parser.add_argument("--seed", type=int, default=0, help="Seed for data (and random pivoting)")
    bench_parser.add_argument("--pivoting", choices=PIVOTING_CHOICES, help="Pivot choice policy (default: median_of_3)")
    bench_parser.set_defaults(func=cmd_bench)

    serve_parser = sub.add_parser("serve", help="Run HTTP service (requires kthselect[server])")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8080)
    _add_selection_flags(serve_parser)
    serve_parser.set_defaults(func=cmd_serve)

    # Simple 'version' subcommand for shells/users preferring explicit command
    version_parser = sub.add_parser("version", help="Show version and exit")
    version_parser.set_defaults(func=lambda _: (print(f"kthselect {__version__}"), 0)[1])

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        set_verbose(True)
    if not getattr(args, "cmd", None):  # No subcommand provided
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
