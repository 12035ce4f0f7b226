"""Command-line interface for sfgraph."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from sfgraph.config import DEFAULT_CONFIG, SolverConfig, load_config
from sfgraph.io import find_instance_files, read_problem
from sfgraph.logging import configure_verbosity, get_logger
from sfgraph.report import (
    FileStats,
    find_best_alpha,
    format_header,
    format_row,
    format_summary,
    process_file,
)

logger = get_logger(__name__)


def _solve_one(path: Path, config: SolverConfig, variation: bool) -> FileStats:
    if variation:
        return find_best_alpha(path, iterations=config.iterations, seed=config.seed)
    return process_file(
        path, alpha=config.alpha, iterations=config.iterations, seed=config.seed
    )


def _run_solve(
    path: Path, config: SolverConfig, variation: bool, as_json: bool
) -> int:
    """Solve a file or every instance below a directory and print the report.

    Returns:
        Process exit code.
    """
    if path.is_dir():
        files = find_instance_files(path, config.suffix)
        if not files:
            logger.warning(f"No '*{config.suffix}' files found under {path}")
            return 0
    elif path.is_file():
        if path.suffix != config.suffix:
            logger.error(f"The file {path} is not '{config.suffix}'")
            return 1
        files = [path]
    else:
        logger.error(f"Path not found: {path}")
        return 1

    logger.info(f"Solving {len(files)} instance(s) from {path}")
    results: List[FileStats] = []
    if not as_json:
        print("\n".join(format_header()))

    for file_path in files:
        try:
            stats = _solve_one(file_path, config, variation)
        except (ValueError, IndexError) as exc:
            logger.error(f"Failed to solve {file_path}: {exc}")
            continue
        results.append(stats)
        if not as_json:
            print(format_row(stats))

    if as_json:
        print(json.dumps([s.to_dict() for s in results], indent=2))
    elif path.is_dir():
        print("\n".join(format_summary(str(path), results)))

    return 0 if results else 1


def _inspect(path: Path) -> int:
    try:
        problem = read_problem(path)
    except (OSError, ValueError, IndexError) as exc:
        logger.error(f"Invalid instance {path}: {exc}")
        return 1
    print(problem)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``sfgraph`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="sfgraph",
        description="Solve Steiner Forest Problem instances with GRASP.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{solve,inspect}",
        help="Available commands",
    )

    solve_parser = subparsers.add_parser("solve", help="Solve instance files")
    solve_parser.add_argument(
        "path", type=Path, help="Instance file or directory to scan recursively"
    )
    solve_parser.add_argument(
        "--alpha", "-a", type=float, default=None, help="RCL parameter in [0, 1]"
    )
    solve_parser.add_argument(
        "--variation",
        action="store_true",
        help="Try alphas 0.0, 0.1, ..., 1.0 and report the best one",
    )
    solve_parser.add_argument(
        "--iterations", "-n", type=int, default=None, help="GRASP iterations"
    )
    solve_parser.add_argument(
        "--seed", type=int, default=None, help="Master seed for reproducible runs"
    )
    solve_parser.add_argument(
        "--suffix", default=None, help="Instance file suffix (default: .stp)"
    )
    solve_parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML file with solver settings; flags override it",
    )
    solve_parser.add_argument(
        "--json", action="store_true", help="Print results as JSON instead of Markdown"
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Validate an instance file and print its summary"
    )
    inspect_parser.add_argument("path", type=Path, help="Instance file")

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)
    configure_verbosity(verbose=args.verbose, quiet=args.quiet)

    if args.command == "inspect":
        raise SystemExit(_inspect(args.path))

    try:
        base = load_config(args.config) if args.config else DEFAULT_CONFIG
        config = base.merged(
            alpha=args.alpha,
            iterations=args.iterations,
            seed=args.seed,
            suffix=args.suffix,
        )
    except (OSError, ValueError) as exc:
        logger.error(f"Invalid configuration: {exc}")
        raise SystemExit(2) from None

    raise SystemExit(_run_solve(args.path, config, args.variation, args.json))


if __name__ == "__main__":
    main()
