"""
Listener for the dashboard API.

The socket is bound here, before uvicorn starts, so that a busy or
privileged port surfaces as a BindError and the process exits non-zero.
"""

import errno
import logging
import socket
import sys

import uvicorn

from dashboard_api.core.config import config

logger = logging.getLogger(__name__)


class BindError(Exception):
    """The listener could not bind its address and port."""

    def __init__(self, address: str, port: int, reason: str):
        self.address = address
        self.port = port
        self.reason = reason
        super().__init__(f"Cannot bind {address}:{port}: {reason}")


class InsufficientPrivilege(BindError):
    """The port requires privileges the process does not have."""


def bind_socket(address: str, port: int) -> socket.socket:
    """
    Bind and listen on address:port.

    Raises:
        InsufficientPrivilege: If the OS refuses the port (EACCES/EPERM)
        BindError: For any other bind failure, e.g. port already in use
    """
    family = socket.AF_INET6 if ":" in address else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((address, port))
        sock.listen(2048)
    except OSError as exc:
        sock.close()
        if exc.errno in (errno.EACCES, errno.EPERM):
            raise InsufficientPrivilege(address, port, exc.strerror or str(exc)) from exc
        raise BindError(address, port, exc.strerror or str(exc)) from exc
    sock.set_inheritable(True)
    return sock


def serve(address: str, port: int) -> None:
    """
    Bind address:port and serve the API until shutdown.

    Raises:
        BindError: If the socket cannot be bound; nothing is served
    """
    sock = bind_socket(address, port)
    logger.info(f"Listening on {address}:{port}")

    server = uvicorn.Server(
        uvicorn.Config(
            "dashboard_api.main:app",
            timeout_keep_alive=config.keep_alive_timeout,
            log_level=config.log_level.lower(),
        )
    )
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()


def main() -> None:
    """Entry point of the `dashboard-api` command."""
    try:
        serve(config.host, config.port)
    except BindError as exc:
        logger.error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
