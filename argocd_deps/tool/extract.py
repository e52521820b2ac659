"""Argocd-deps extract action."""

import logging
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from typing import cast, Any
import pathlib

from argocd_deps import repo
from argocd_deps.config import DEFAULT_FILE_MATCH, ExtractConfig

from .format import PrintFormatter, YamlListFormatter, JsonFormatter, StructFormatter


_LOGGER = logging.getLogger(__name__)

TABLE_COLS = ["file", "datasource", "dep_name", "current_value"]


class ExtractAction:
    """Extract dependencies from ArgoCD manifests."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "extract",
                aliases=["deps"],
                help="Extract dependencies from ArgoCD Applications",
                description=(
                    "Print the container images, Helm charts and git repositories "
                    "referenced by local ArgoCD Application and ApplicationSet objects"
                ),
            ),
        )
        args.add_argument(
            "--path",
            help="Optional path to scan, defaults to the root of the git repo",
            type=pathlib.Path,
            default=None,
            nargs="?",
        )
        args.add_argument(
            "--file-match",
            help=f"Glob pattern of files to scan (default: {', '.join(DEFAULT_FILE_MATCH)})",
            action="append",
            default=None,
        )
        args.add_argument(
            "--output",
            "-o",
            choices=["table", "yaml", "json"],
            default="table",
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        path: pathlib.Path | None,
        file_match: list[str] | None,
        output: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = ExtractConfig(path=path)
        if file_match:
            config.file_match = file_match
        results = await repo.extract_all_package_files(config)

        if output == "table":
            rows: list[dict[str, Any]] = []
            for result in results:
                for dep in result.deps:
                    rows.append(
                        {
                            "file": result.package_file,
                            "datasource": dep.datasource,
                            "dep_name": dep.dep_name,
                            "current_value": dep.current_value,
                        }
                    )
            if not rows:
                print("No dependencies found")
                return
            PrintFormatter(TABLE_COLS).print(rows)
            return

        formatter: StructFormatter
        if output == "json":
            formatter = JsonFormatter()
        else:
            formatter = YamlListFormatter()
        formatter.print([result.to_dict() for result in results])
