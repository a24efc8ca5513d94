import argparse
import logging
import socket
import threading
from typing import List, Optional

from webserver.config import HOST, LISTEN_BACKLOG, PORT, REQUEST_TIMEOUT, WEB_ROOT, RenderMode, ServerConfig
from webserver.worker import handle_connection

logger = logging.getLogger(__name__)


def create_server_socket(config: ServerConfig) -> socket.socket:
    # Create a TCP socket
    server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    server_socket.bind((config.host, config.port))

    # Listen for incoming connections
    server_socket.listen(LISTEN_BACKLOG)
    return server_socket


def serve(server_socket: socket.socket, config: ServerConfig) -> None:
    while True:
        try:
            client_socket, client_address = server_socket.accept()
        except OSError as e:
            # Listening socket was shut down or closed
            logger.info("Stopped accepting connections: %s", e)
            return

        # Hands off socket management to thread
        # NOTE: Threads are never joined, each one exits after its single exchange
        incoming_thread = threading.Thread(
            target=handle_connection,
            args=(client_socket, client_address, config),
            daemon=True
        )
        incoming_thread.start()


def run_server(config: ServerConfig) -> None:
    server_socket = create_server_socket(config)
    host, port = server_socket.getsockname()[:2]
    logger.info("Server listening on http://%s:%s (root: %s, mode: %s)", host, port, config.web_root, config.render_mode.value)

    try:
        serve(server_socket, config)
    except KeyboardInterrupt:
        logger.info("Shutting down server...")
    finally:
        server_socket.close()


def _timeout(value: str) -> Optional[float]:
    seconds = float(value)
    return seconds if seconds > 0 else None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve files from a directory, one request per connection")
    parser.add_argument("--host", default=HOST, help="Address to bind")
    parser.add_argument("-p", "--port", type=int, default=PORT, help="Port to listen on")
    parser.add_argument("-d", "--root", default=WEB_ROOT, help="Directory that request paths are resolved against")
    parser.add_argument(
        "--render-mode",
        choices=[mode.value for mode in RenderMode],
        default=RenderMode.FULL_TEXT.value,
        help="Serve whole text pages or only the region between the begin/end markers"
    )
    parser.add_argument("--timeout", type=_timeout, default=REQUEST_TIMEOUT, help="Per-connection socket timeout in seconds, 0 disables it")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    return ServerConfig(
        host=args.host,
        port=args.port,
        web_root=args.root,
        render_mode=RenderMode(args.render_mode),
        request_timeout=args.timeout
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    run_server(config_from_args(args))


if __name__ == "__main__":
    main()
