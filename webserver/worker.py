"""
Responsibility: run one request/response exchange on one connection.

AWAITING_REQUEST_LINE -> READING_HEADERS -> ROUTING -> WRITING_HEADERS
-> WRITING_BODY -> CLOSED, or ABORTED from any of them on a parse or I/O
failure. Each worker owns its socket and shares nothing with other workers.
"""

import enum
import logging
import socket
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Final, List, Optional

from webserver.config import ServerConfig
from webserver.content import ContentRoute, route
from webserver.errors import ParseError
from webserver.http_request import HttpRequest, drain_headers, read_request_line
from webserver.http_response import write_header
from webserver.render import write_binary_body, write_not_found_body, write_text_body
from webserver.resource import Resource

logger = logging.getLogger(__name__)


class ExchangeState(enum.Enum):
    AWAITING_REQUEST_LINE = "awaiting_request_line"
    READING_HEADERS = "reading_headers"
    ROUTING = "routing"
    WRITING_HEADERS = "writing_headers"
    WRITING_BODY = "writing_body"
    CLOSED = "closed"
    ABORTED = "aborted"


STATE_ORDER: Final[List[ExchangeState]] = [
    ExchangeState.AWAITING_REQUEST_LINE,
    ExchangeState.READING_HEADERS,
    ExchangeState.ROUTING,
    ExchangeState.WRITING_HEADERS,
    ExchangeState.WRITING_BODY,
    ExchangeState.CLOSED,
]


@dataclass
class Exchange:
    """
    Progress of a single exchange. States only ever move forward.
    """
    state: ExchangeState = ExchangeState.AWAITING_REQUEST_LINE
    request: Optional[HttpRequest] = None
    resource: Optional[Resource] = None
    content: Optional[ContentRoute] = None
    body_length: int = 0

    @property
    def finished(self) -> bool:
        return self.state in (ExchangeState.CLOSED, ExchangeState.ABORTED)

    def advance(self, state: ExchangeState) -> None:
        if self.finished:
            raise RuntimeError(f"Exchange already {self.state.value}")

        if state is not ExchangeState.ABORTED:
            expected = STATE_ORDER[STATE_ORDER.index(self.state) + 1]
            if state is not expected:
                raise RuntimeError(f"Invalid transition {self.state.value} -> {state.value}")

        logger.debug("Exchange %s -> %s", self.state.value, state.value)
        self.state = state


def serve_exchange(rfile: BinaryIO, wfile: BinaryIO, config: ServerConfig, now: Optional[datetime] = None) -> Exchange:
    exchange = Exchange()

    try:
        exchange.request = read_request_line(rfile)
        exchange.advance(ExchangeState.READING_HEADERS)
        drain_headers(rfile)

        exchange.advance(ExchangeState.ROUTING)
        exchange.resource = Resource.resolve(config.web_root, exchange.request.target)
        exchange.content = route(exchange.resource.path)
        logger.info(
            "%s %s -> %s (%s)",
            exchange.request.method,
            exchange.request.target,
            exchange.resource.path,
            exchange.content.content_type
        )

        exchange.advance(ExchangeState.WRITING_HEADERS)
        write_header(wfile, exchange.resource.found, exchange.content.content_type, now)

        exchange.advance(ExchangeState.WRITING_BODY)
        if not exchange.resource.found:
            exchange.body_length = write_not_found_body(wfile)
        elif exchange.content.binary:
            exchange.body_length = write_binary_body(wfile, exchange.resource)
        else:
            exchange.body_length = write_text_body(wfile, exchange.resource, config.render_mode, now)

        wfile.flush()
        exchange.advance(ExchangeState.CLOSED)

    except ParseError as e:
        logger.warning("Error parsing request: %s", e)
        exchange.advance(ExchangeState.ABORTED)
    except OSError as e:
        # Whatever was already written stays written; the client sees a truncated response
        logger.error("I/O error during %s: %s", exchange.state.value, e)
        exchange.advance(ExchangeState.ABORTED)

    return exchange


def handle_connection(client_socket: socket.socket, client_address, config: ServerConfig) -> Optional[Exchange]:
    logger.info("Connection from %s", client_address)
    exchange = None

    try:
        # Deadline for each blocking read and write on this connection
        client_socket.settimeout(config.request_timeout)

        with client_socket.makefile("rb") as rfile, client_socket.makefile("wb") as wfile:
            exchange = serve_exchange(rfile, wfile, config)

    except OSError as e:
        logger.error("Error handling connection from %s: %s", client_address, e)
    finally:
        client_socket.close()

    logger.info("Done handling %s (%s)", client_address, exchange.state.value if exchange else "aborted")
    return exchange
