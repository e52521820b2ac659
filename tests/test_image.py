"""Tests for image."""

import pytest

from argocd_deps.image import split_image_parts


@pytest.mark.parametrize(
    ("image", "expected"),
    [
        ("nginx", ("nginx", None, None)),
        ("nginx:1.25", ("nginx", "1.25", None)),
        ("myrepo/nginx:1.2.3", ("myrepo/nginx", "1.2.3", None)),
        ("ghcr.io/home-operations/qbittorrent:latest", ("ghcr.io/home-operations/qbittorrent", "latest", None)),
        ("registry.example.com:5000/app", ("registry.example.com:5000/app", None, None)),
        ("registry.example.com:5000/app:v2", ("registry.example.com:5000/app", "v2", None)),
        ("alpine@sha256:1234abcd", ("alpine", None, "sha256:1234abcd")),
        ("alpine:3.19@sha256:1234abcd", ("alpine", "3.19", "sha256:1234abcd")),
        ("a@b@c", ("a", None, "b")),
        ("nginx:", ("nginx", "", None)),
    ],
    ids=["name", "tag", "path", "registry", "port", "port-tag", "digest", "tag-digest", "multiple-digests", "empty-tag"],
)
def test_split_image_parts(image: str, expected: tuple[str, str | None, str | None]) -> None:
    """Test splitting image references into their components."""
    parts = split_image_parts(image)
    assert (parts.dep_name, parts.current_value, parts.current_digest) == expected
    assert parts.replace_string == image
