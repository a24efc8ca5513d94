"""
Responsibility: build the status-line and the fixed header block, and the
date string shared by the Date header and the page placeholders.

Header order is part of the wire contract:
Status-line, Date, Server, Connection, Content-Type, blank line.
"""

import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import BinaryIO, Final, Optional

logger = logging.getLogger(__name__)

HTTP_VERSION: Final[str] = "HTTP/1.1"
SERVER_NAME: Final[str] = "Navarre's very own server"
STATUS_OK: Final[str] = "200 OK"
STATUS_NOT_FOUND: Final[str] = "404 NOT FOUND"
NOT_FOUND_BODY: Final[bytes] = b"404 NOT FOUND!"


def format_http_date(now: Optional[datetime] = None) -> str:
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)

    return format_datetime(now, usegmt=True)


def create_header(found: bool, content_type: str, date: str) -> bytes:
    status = STATUS_OK if found else STATUS_NOT_FOUND

    header = f"{HTTP_VERSION} {status}\r\n"
    header += f"Date: {date}\r\n"
    header += f"Server: {SERVER_NAME}\r\n"
    header += "Connection: close\r\n"
    header += f"Content-Type: {content_type}\r\n"

    # End of header block, the body follows immediately
    header += "\r\n"

    return header.encode("utf-8")


def write_header(wfile: BinaryIO, found: bool, content_type: str, now: Optional[datetime] = None) -> bytes:
    header = create_header(found, content_type, format_http_date(now))
    wfile.write(header)
    logger.debug("Response: %s", header.split(b"\r\n", 1)[0].decode("utf-8"))
    return header
