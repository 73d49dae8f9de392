"""Command-line wrapper: ``snapquire FILE`` prints the lazified script."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .errors import SnapquireError
from .lazify import Snapquirer
from .policy import KeepEagerPolicy
from .transform_types import TransformOptions

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snapquire",
        description="Defer top-level require() calls so a script can be snapshotted",
    )
    parser.add_argument("file", help="JavaScript file to transform")
    parser.add_argument(
        "--basedir",
        "-b",
        default=None,
        help="Directory for module resolution (default: the file's directory)",
    )
    parser.add_argument(
        "--keep-eager",
        "-k",
        action="append",
        default=[],
        metavar="MODULE",
        help="Module name to leave eagerly required (repeatable)",
    )
    parser.add_argument(
        "--output", "-o", default=None, help="Write the result here instead of stdout"
    )
    parser.add_argument(
        "--stats", action="store_true", help="Print transform statistics to stderr"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log transform decisions (-vv for ancestor traces)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.verbose:
        level = logging.DEBUG if args.verbose > 1 else logging.INFO
        logging.basicConfig(level=level, format="%(name)s: %(message)s")

    path = Path(args.file).resolve()
    options = TransformOptions(
        full_file_path=str(path),
        basedir=args.basedir,
        should_defer=KeepEagerPolicy(args.keep_eager),
    )
    try:
        source = path.read_text(encoding="utf-8")
        snapquirer = Snapquirer(source, options)
        result = snapquirer.transform()
    except (OSError, SnapquireError) as exc:
        print(f"snapquire: {exc}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(result, encoding="utf-8")
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(result)
    if args.stats:
        print(snapquirer.stats.report(), file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
