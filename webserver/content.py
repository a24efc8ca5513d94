"""
Responsibility: classify a requested path by its extension and pick the
Content-Type. Images are streamed as raw bytes, everything else is treated
as a text page.
"""

from dataclasses import dataclass
from typing import Dict, Final, FrozenSet

DEFAULT_CONTENT_TYPE: Final[str] = "text/html"

MIME_TYPES: Final[Dict[str, str]] = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "gif": "image/gif",
    "html": "text/html",
}

BINARY_EXTENSIONS: Final[FrozenSet[str]] = frozenset({"png", "jpeg", "jpg", "gif"})


@dataclass(frozen=True)
class ContentRoute:
    content_type: str
    binary: bool


def extension_of(path: str) -> str:
    # Everything after the final '.', kept in the case it was written
    _, dot, extension = path.rpartition(".")
    return extension if dot else ""


def route(path: str) -> ContentRoute:
    extension = extension_of(path)
    return ContentRoute(
        content_type=MIME_TYPES.get(extension, DEFAULT_CONTENT_TYPE),
        binary=extension in BINARY_EXTENSIONS
    )
