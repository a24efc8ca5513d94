"""
Responsibility: map a request target onto the filesystem below the web root
and expose the few operations the renderer needs.

A resource is resolved once per exchange and read at most once. Nothing is
cached between exchanges.
"""

import os
from dataclasses import dataclass
from typing import Optional

from webserver.content import extension_of
from webserver.errors import NotFoundError


def resolve_path(web_root: str, target: str) -> Optional[str]:
    # "/www/index.html" is looked up as "www/index.html" under the web root
    relative_path = target.lstrip("/")
    root = os.path.abspath(web_root)
    file_path = os.path.normpath(os.path.join(root, relative_path))

    # Targets like /../../etc/passwd must not leave the web root
    if os.path.commonpath([file_path, root]) != root:
        return None

    return file_path


@dataclass(frozen=True)
class Resource:
    """
    The filesystem entry named by a request target
    """
    path: str
    exists: bool
    is_dir: bool
    length: int
    extension: str

    @property
    def found(self) -> bool:
        return self.exists and not self.is_dir

    @classmethod
    def resolve(cls, web_root: str, target: str) -> "Resource":
        file_path = resolve_path(web_root, target)
        if file_path is None:
            return cls(path=target, exists=False, is_dir=False, length=0, extension=extension_of(target))

        exists = os.path.exists(file_path)
        is_dir = os.path.isdir(file_path)
        length = os.path.getsize(file_path) if exists and not is_dir else 0

        return cls(
            path=file_path,
            exists=exists,
            is_dir=is_dir,
            length=length,
            extension=extension_of(file_path)
        )

    def read_bytes(self) -> bytes:
        if not self.found:
            raise NotFoundError(self.path)

        with open(self.path, "rb") as f:
            return f.read(self.length)

    def read_text(self) -> str:
        if not self.found:
            raise NotFoundError(self.path)

        # surrogateescape lets any byte sequence survive a decode/encode round trip
        with open(self.path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            return f.read()
