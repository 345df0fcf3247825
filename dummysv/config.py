from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Optional, Sequence

from werkzeug.datastructures import Headers

from dummysv import __version__
from dummysv.headers import parse_header_args

DEFAULT_BODY = "OK"
DEFAULT_STATUS = 200
DEFAULT_NETWORK = "tcp"
DEFAULT_ADDRESS = "127.0.0.1:8080"


@dataclass(frozen=True)
class ServerConfig:
    body: str = DEFAULT_BODY
    status: int = DEFAULT_STATUS
    headers: Headers = field(default_factory=Headers)
    verbose: bool = False
    network: str = DEFAULT_NETWORK
    address: str = DEFAULT_ADDRESS


def _status_code(raw: str) -> int:
    try:
        code = int(raw, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid status code: {raw!r}") from None
    # Three digits is all a status line can carry.
    if code < 100 or code > 999:
        raise argparse.ArgumentTypeError(f"status code out of range: {code}")
    return code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dummysv",
        description="Respond to every HTTP request with a fixed body, status code and headers.",
    )
    parser.add_argument("-r", dest="body", metavar="body", default=DEFAULT_BODY, help="The body to reply with.")
    parser.add_argument(
        "-s",
        dest="status",
        metavar="status",
        type=_status_code,
        default=DEFAULT_STATUS,
        help="The status code to respond with.",
    )
    parser.add_argument("-n", dest="network", metavar="network", default=DEFAULT_NETWORK, help="The network to listen on.")
    parser.add_argument("-L", dest="address", metavar="address", default=DEFAULT_ADDRESS, help="The address to listen on.")
    parser.add_argument("-v", dest="verbose", action="store_true", help="Whether to log all received requests.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    # Flags end at the first header token; everything after it is a header.
    parser.add_argument(
        "headers",
        metavar="name:value",
        nargs=argparse.REMAINDER,
        help="Response header to send with every reply.",
    )
    return parser


def _header_tokens(tokens: Sequence[str]) -> list[str]:
    tokens = list(tokens)
    if tokens and tokens[0] == "--":
        return tokens[1:]
    return tokens


def parse_config(argv: Optional[Sequence[str]] = None) -> ServerConfig:
    """Build the server configuration from command-line arguments.

    Raises ``HeaderError`` for a malformed header token. Usage errors exit
    through argparse.
    """
    args = build_parser().parse_args(argv)
    return ServerConfig(
        body=args.body,
        status=args.status,
        headers=parse_header_args(_header_tokens(args.headers)),
        verbose=bool(args.verbose),
        network=args.network,
        address=args.address,
    )
