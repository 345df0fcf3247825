from __future__ import annotations

import logging
from urllib.parse import quote

from flask import Flask, Request, Response, request

from dummysv.config import ServerConfig

_SKIP_DUMP_HEADERS = {"host", "transfer-encoding", "trailer"}


class CannedResponse(Response):
    default_mimetype = "text/plain"


def _request_target(req: Request) -> str:
    environ = req.environ
    raw = environ.get("RAW_URI") or environ.get("REQUEST_URI")
    if raw:
        return str(raw)
    path = quote(environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", ""), safe="/:@!$&'()*+,;=-._~%")
    query = environ.get("QUERY_STRING", "")
    return f"{path or '/'}?{query}" if query else (path or "/")


def dump_request(req: Request) -> bytes:
    """Render a request the way it looked on the wire, body included."""
    protocol = req.environ.get("SERVER_PROTOCOL") or "HTTP/1.1"
    lines = [f"{req.method} {_request_target(req)} {protocol}"]
    host = req.headers.get("Host") or req.host
    if host:
        lines.append(f"Host: {host}")
    for name, value in req.headers.items():
        if name.lower() in _SKIP_DUMP_HEADERS:
            continue
        lines.append(f"{name}: {value}")
    head = "\r\n".join(lines) + "\r\n\r\n"
    return head.encode("latin-1") + req.get_data(cache=True)


def build_response(config: ServerConfig) -> CannedResponse:
    # Copy so the shared mapping never picks up Content-Type or Content-Length.
    response = CannedResponse(
        config.body if config.body else None,
        status=config.status,
        headers=config.headers.copy(),
    )
    # Without a body there is nothing to label.
    if not config.body and "Content-Type" not in config.headers:
        response.headers.remove("Content-Type")
    return response


def create_app(config: ServerConfig, logger: logging.Logger) -> Flask:
    app = Flask("dummysv", static_folder=None)
    app.response_class = CannedResponse

    # Runs before URL matching is acted on, so every method and path lands here.
    @app.before_request
    def reply():
        response = build_response(config)
        if config.verbose:
            try:
                dumped = dump_request(request)
            except Exception as exc:
                logger.error("Error dumping request: %s", exc)
                return response
            logger.info("%s", dumped.decode("utf-8", errors="replace"))
        return response

    return app
