"""
Responsibility: server defaults and the per-process configuration handed to
every connection handler.
"""

import enum
from dataclasses import dataclass
from typing import Final, Optional

HOST: Final[str] = "127.0.0.1"  # localhost
PORT: Final[int] = 8080         # Port number
WEB_ROOT: Final[str] = "."      # Current directory
REQUEST_TIMEOUT: Final[float] = 10.0  # Seconds a client may stay silent
LISTEN_BACKLOG: Final[int] = 5


class RenderMode(enum.Enum):
    FULL_TEXT = "full_text"
    MARKED_REGION = "marked_region"


@dataclass(frozen=True)
class ServerConfig:
    """
    Read-only settings shared by the accept loop and every worker thread
    """
    host: str = HOST
    port: int = PORT
    web_root: str = WEB_ROOT
    render_mode: RenderMode = RenderMode.FULL_TEXT
    # None disables the deadline and leaves the socket fully blocking
    request_timeout: Optional[float] = REQUEST_TIMEOUT
