"""Image update intents carried by a single product update request.

Exactly one intent is active per request. When a request carries several
image fields, precedence is RemoveImage > ReplaceWithFile > ReplaceWithUrl >
NoChange.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class ImageFile:
    """An uploaded image binary with its client-declared metadata."""

    content: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class RemoveImage:
    """Clear the product image."""


@dataclass(frozen=True)
class ReplaceWithFile:
    """Upload a new binary and use the resulting URL."""

    image: ImageFile


@dataclass(frozen=True)
class ReplaceWithUrl:
    """Use the given URL verbatim."""

    url: str


@dataclass(frozen=True)
class NoChange:
    """Keep the existing image value."""


UpdateIntent = Union[RemoveImage, ReplaceWithFile, ReplaceWithUrl, NoChange]


def build_update_intent(
    remove_image: bool = False,
    image_file: Optional[ImageFile] = None,
    image_url: Optional[str] = None,
) -> UpdateIntent:
    """Resolve the raw request fields into a single intent.

    Args:
        remove_image: Whether the client asked for the image to be cleared.
        image_file: Uploaded file, if any.
        image_url: Supplied URL, if any. Blank strings count as absent.

    Returns:
        The intent with the highest precedence among the fields present.
    """
    if remove_image:
        return RemoveImage()
    if image_file is not None:
        return ReplaceWithFile(image=image_file)
    if image_url and image_url.strip():
        return ReplaceWithUrl(url=image_url.strip())
    return NoChange()
