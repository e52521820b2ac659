"""
Library for extracting dependency references from ArgoCD manifests.
"""

__all__ = [
    "extract",
    "manifest",
    "image",
    "repo",
    "exceptions",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
