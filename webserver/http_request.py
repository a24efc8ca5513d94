"""
Responsibility: read the request line and drain the header block, producing
an immutable HttpRequest with fields: method, target, http_version.

Error cases: stream closed before a first line or malformed request line ->
ParseError (the exchange is aborted and no response is sent).
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Final

from webserver.errors import ParseError

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH: Final[int] = 8192


@dataclass(frozen=True)
class HttpRequest:
    """
    Holds the request line. Header fields are read but never kept.
    """
    method: str
    target: str
    http_version: str


def parse_request_line(line: str) -> HttpRequest:
    # Split on any run of whitespace so the method and protocol tokens can be any length
    parts = line.split()
    if len(parts) != 3:
        raise ParseError(f"Malformed request-line: {line!r}")

    method, target, version = parts
    return HttpRequest(method=method, target=target, http_version=version)


def _read_line(rfile: BinaryIO) -> bytes:
    # readline() blocks until a full line, EOF or the socket timeout
    return rfile.readline(MAX_LINE_LENGTH + 1)


def drain_headers(rfile: BinaryIO) -> int:
    """
    Read and discard header lines until the blank line that ends the block.
    Stops quietly at end of stream or on a read failure. Returns the number
    of header lines discarded.
    """
    count = 0
    # False while inside a header longer than one read, whose tail is still coming
    at_line_start = True
    while True:
        try:
            raw = _read_line(rfile)
        except OSError as e:
            logger.warning("Stopped reading headers: %s", e)
            return count

        if raw == b"":
            logger.debug("Stream ended before blank line")
            return count

        continuation = not at_line_start
        at_line_start = raw.endswith(b"\n")
        if continuation:
            continue

        line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
        if line == "":
            return count

        logger.debug("Request header: (%s)", line[:80])
        count += 1


def read_request_line(rfile: BinaryIO) -> HttpRequest:
    try:
        raw = _read_line(rfile)
    except OSError as e:
        raise ParseError(f"Failed to read request-line: {e}") from e

    if raw == b"":
        raise ParseError("Connection closed before request-line")

    if len(raw) > MAX_LINE_LENGTH:
        raise ParseError("Request-line too long")

    if not raw.endswith(b"\n"):
        raise ParseError("Connection closed mid request-line")

    line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
    logger.debug("Request line: (%s)", line)
    return parse_request_line(line)
