"""
Responsibility: write the response body once the header block is out.

Text pages get their placeholders substituted and are emitted either whole
(RenderMode.FULL_TEXT) or as the span between the begin/end markers
(RenderMode.MARKED_REGION). Images are copied byte for byte.
"""

import logging
import string
from datetime import datetime
from typing import BinaryIO, Dict, Final, List, Optional

from webserver.config import RenderMode
from webserver.http_response import NOT_FOUND_BODY, format_http_date
from webserver.resource import Resource

logger = logging.getLogger(__name__)

DATE_TOKEN: Final[str] = "<cs371date>"
SERVER_TOKEN: Final[str] = "<cs371server>"
SERVER_DISPLAY_NAME: Final[str] = "Navarre's Server"
BEGIN_MARKER: Final[str] = "<cs371begin>"
END_MARKER: Final[str] = "<cs371end>"


def _replacements(date: str) -> Dict[str, str]:
    return {DATE_TOKEN: date, SERVER_TOKEN: SERVER_DISPLAY_NAME}


def substitute_placeholders(text: str, date: str) -> str:
    for token, value in _replacements(date).items():
        text = text.replace(token, value)
    return text


def render_full_text(text: str, date: str) -> str:
    return substitute_placeholders(text, date)


def _substitute_token(token: str, replacements: Dict[str, str]) -> str:
    if token in replacements:
        return replacements[token]

    # A placeholder may end a sentence, e.g. "<cs371server>." keeps its "."
    head, tail = token[:-1], token[-1:]
    if tail and tail in string.punctuation and head in replacements:
        return replacements[head] + tail

    return token


def render_marked_region(text: str, date: str) -> str:
    tokens = text.split()

    # Without a begin marker the region starts at the first token,
    # without an end marker it runs to the last one
    start = tokens.index(BEGIN_MARKER) + 1 if BEGIN_MARKER in tokens else 0
    try:
        end = tokens.index(END_MARKER, start)
    except ValueError:
        end = len(tokens)

    replacements = _replacements(date)
    region: List[str] = [_substitute_token(token, replacements) for token in tokens[start:end]]
    return " ".join(region)


def render_text(text: str, mode: RenderMode, date: str) -> str:
    if mode is RenderMode.MARKED_REGION:
        return render_marked_region(text, date)
    return render_full_text(text, date)


def write_text_body(wfile: BinaryIO, resource: Resource, mode: RenderMode, now: Optional[datetime] = None) -> int:
    text = render_text(resource.read_text(), mode, format_http_date(now))
    body = text.encode("utf-8", errors="surrogateescape")
    wfile.write(body)
    return len(body)


def write_binary_body(wfile: BinaryIO, resource: Resource) -> int:
    try:
        body = resource.read_bytes()
    except OSError as e:
        # Headers are already out, so an empty body is the best we can do
        logger.warning("Could not read %s: %s", resource.path, e)
        return 0

    wfile.write(body)
    return len(body)


def write_not_found_body(wfile: BinaryIO) -> int:
    wfile.write(NOT_FOUND_BODY)
    return len(NOT_FOUND_BODY)
