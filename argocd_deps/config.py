"""Configuration objects for argocd-deps."""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_FILE_MATCH = ["*.yaml", "*.yml"]
DEFAULT_IGNORE_DIRS = [".git", "venv", ".venv"]


@dataclass
class ExtractConfig:
    """Configuration for extracting dependencies from a repository."""

    path: Path | None = None
    """Directory to scan, defaults to the root of the enclosing git repo."""

    file_match: list[str] = field(default_factory=lambda: list(DEFAULT_FILE_MATCH))
    """Glob patterns for the files that may contain ArgoCD manifests."""

    ignore_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_DIRS))
    """Directory names that are never descended into."""
