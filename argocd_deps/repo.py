"""Library for extracting dependencies from all ArgoCD manifests in a local repo.

Example usage:

```python
from argocd_deps import repo
from argocd_deps.config import ExtractConfig

results = await repo.extract_all_package_files(ExtractConfig(path=Path("k8s")))
for result in results:
    print(f"Found {len(result.deps)} dependencies in {result.package_file}")
```
"""

from collections.abc import Generator
from fnmatch import fnmatch
from functools import cache
import logging
import os
from pathlib import Path

import aiofiles
import git

from .config import ExtractConfig
from .exceptions import ArgoException, InputException
from .extract import extract_package_file
from .manifest import PackageFileContent

__all__ = [
    "extract_all_package_files",
    "repo_root",
]

_LOGGER = logging.getLogger(__name__)


@cache
def repo_root(path: Path | None = None) -> Path:
    """Return the root of the git repo containing the path."""
    try:
        repo = git.repo.Repo(
            str(path) if path else os.getcwd(), search_parent_directories=True
        )
    except git.GitError as err:
        raise InputException(f"Unable to find git repo for path {path}: {err}") from err
    return Path(repo.git.rev_parse("--show-toplevel"))


def find_package_files(root: Path, config: ExtractConfig) -> Generator[Path, None, None]:
    """Yield the files under root matching the configured file patterns."""
    for dirpath, dirnames, filenames in os.walk(str(root)):
        # Prune ignored directories in place so os.walk skips them
        dirnames[:] = sorted(d for d in dirnames if d not in config.ignore_dirs)
        for filename in sorted(filenames):
            full_path = Path(dirpath) / filename
            relative_path = full_path.relative_to(root)
            if any(
                fnmatch(filename, pattern) or fnmatch(str(relative_path), pattern)
                for pattern in config.file_match
            ):
                yield full_path


async def extract_all_package_files(
    config: ExtractConfig,
) -> list[PackageFileContent]:
    """Extract dependencies from every matching file in the repo."""
    root = config.path if config.path is not None else repo_root()
    if not root.is_dir():
        raise InputException(f"Path is not a directory: {root}")

    results: list[PackageFileContent] = []
    for path in find_package_files(root, config):
        package_file = str(path.relative_to(root))
        _LOGGER.debug("Processing file: %s", package_file)
        try:
            async with aiofiles.open(str(path), encoding="utf-8") as manifest_file:
                content = await manifest_file.read()
        except (OSError, UnicodeDecodeError) as err:
            raise ArgoException(f"Failed to read file {path}: {err}") from err
        if result := extract_package_file(content, package_file, config):
            result.package_file = package_file
            results.append(result)
    _LOGGER.debug("Found dependencies in %s files", len(results))
    results.sort(key=lambda result: result.package_file or "")
    return results
