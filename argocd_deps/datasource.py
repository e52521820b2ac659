"""Identifiers of the datasources used to look up new versions of a dependency."""

__all__ = [
    "DOCKER",
    "HELM",
    "GIT_TAGS",
]

DOCKER = "docker"
"""Container image registry, also used for Helm charts published as OCI artifacts."""

HELM = "helm"
"""Helm chart repository index served over http(s)."""

GIT_TAGS = "git-tags"
"""Tags of a git repository."""
