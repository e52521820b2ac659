"""Exceptions related to argocd-deps."""

__all__ = [
    "ArgoException",
    "InputException",
]


class ArgoException(Exception):
    """Generic base exception used for this library."""


class InputException(ArgoException):
    """Raised when the input files or documents are not formatted as expected."""
