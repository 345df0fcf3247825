from __future__ import annotations

import os
import socket
import threading
from typing import Optional

from flask import Flask
from werkzeug.serving import BaseWSGIServer, make_server

TCP_NETWORKS = {"tcp": socket.AF_UNSPEC, "tcp4": socket.AF_INET, "tcp6": socket.AF_INET6}
WILDCARD_HOSTS = {"tcp": "0.0.0.0", "tcp4": "0.0.0.0", "tcp6": "::"}
UNIX_NETWORKS = {"unix"}


class ListenError(OSError):
    pass


def split_host_port(address: str) -> tuple[str, str]:
    text = str(address or "")
    host, sep, port = text.rpartition(":")
    if not sep:
        raise ListenError(f"address {text}: missing port in address")
    if host.startswith("["):
        if not host.endswith("]"):
            raise ListenError(f"address {text}: missing ']' in address")
        host = host[1:-1]
    elif ":" in host:
        raise ListenError(f"address {text}: too many colons in address")
    return host, port


def _bind_tcp(network: str, address: str) -> socket.socket:
    host, port = split_host_port(address)
    try:
        infos = socket.getaddrinfo(
            host or WILDCARD_HOSTS[network],
            port or 0,
            TCP_NETWORKS[network],
            socket.SOCK_STREAM,
            0,
            socket.AI_PASSIVE,
        )
    except socket.gaierror as exc:
        raise ListenError(f"listen {network} {address}: {exc}") from exc
    family, socktype, proto, _canon, sockaddr = infos[0]
    sock = socket.socket(family, socktype, proto)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(sockaddr)
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    return sock


def _bind_unix(address: str) -> socket.socket:
    if not hasattr(socket, "AF_UNIX"):
        raise ListenError("unix sockets are not supported on this platform")
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(address)
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    return sock


def listen(network: str, address: str) -> socket.socket:
    """Bind a listening socket for ``network`` (tcp, tcp4, tcp6 or unix)."""
    if network in TCP_NETWORKS:
        return _bind_tcp(network, address)
    if network in UNIX_NETWORKS:
        return _bind_unix(address)
    raise ListenError(f"listen {network}: unknown network {network}")


def format_address(sock: socket.socket) -> str:
    name = sock.getsockname()
    if sock.family == getattr(socket, "AF_UNIX", None):
        return str(name)
    host, port = name[0], name[1]
    if sock.family == socket.AF_INET6:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


class DummyServer:
    """Serves a WSGI app on an already bound listener from a background thread."""

    def __init__(self, app: Flask, listener: socket.socket) -> None:
        self._app = app
        self._listener = listener
        self._server: Optional[BaseWSGIServer] = None
        self._thread: threading.Thread | None = None

    @property
    def address(self) -> str:
        return format_address(self._listener)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _server_host_port(self) -> tuple[str, int]:
        # werkzeug picks the socket family for fd= from the host string.
        if self._listener.family == getattr(socket, "AF_UNIX", None):
            return f"unix://{self._listener.getsockname()}", 0
        host, port = self._listener.getsockname()[:2]
        return host, int(port)

    def start(self) -> None:
        host, port = self._server_host_port()
        self._server = make_server(host, port, self._app, threaded=True, fd=self._listener.fileno())
        self._thread = threading.Thread(target=self._server.serve_forever, name="dummysv-serve", daemon=True)
        self._thread.start()

    def close(self) -> None:
        """Stop serving and release the listener. In-flight requests are not drained."""
        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
        path = self._listener.getsockname() if self._listener.family == getattr(socket, "AF_UNIX", None) else None
        self._listener.close()
        if path and os.path.exists(path):
            os.unlink(path)
