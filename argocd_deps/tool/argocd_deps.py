"""Command line tool for extracting dependencies from ArgoCD manifests."""

import argparse
import asyncio
import logging
import sys
import traceback

from argocd_deps.exceptions import ArgoException
from . import extract

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for inspecting ArgoCD application dependencies.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    extract.ExtractAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Argocd-deps command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except ArgoException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("argocd-deps error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
