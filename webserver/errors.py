"""
Responsibility: error taxonomy for a single exchange.

ParseError aborts the exchange with no response. NotFoundError becomes a 404.
Transport and filesystem failures are left as OSError.
"""


class ServerError(RuntimeError):
    """
    Base for errors raised while serving one connection
    """


class ParseError(ServerError):
    """
    Request line missing or malformed
    """


class NotFoundError(ServerError):
    """
    Requested path does not exist or is a directory
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Not found: {path}")
        self.path = path
