"""Helper functions for working with container image references."""

from dataclasses import dataclass

__all__ = [
    "ImageParts",
    "split_image_parts",
]


@dataclass
class ImageParts:
    """The components of an image reference `repo[:tag][@digest]`."""

    dep_name: str
    """The image repository, including any registry host and port."""

    current_value: str | None
    """The tag, if present."""

    current_digest: str | None
    """The digest, if present."""

    replace_string: str
    """The original image reference."""


def split_image_parts(image: str) -> ImageParts:
    """Split an image reference into the repository, tag and digest.

    Only the text between the first and second `@` is the digest. A `:` is
    only treated as a tag separator when it appears after the last `/` so that
    a registry port (e.g. `registry:5000/app`) is not mistaken for a tag. An
    empty tag (`nginx:`) is kept as an empty string.
    """
    name, *digests = image.split("@")
    tag: str | None = None
    repo, sep, suffix = name.rpartition(":")
    if sep and "/" not in suffix:
        name, tag = repo, suffix
    return ImageParts(
        dep_name=name,
        current_value=tag,
        current_digest=digests[0] if digests else None,
        replace_string=image,
    )
