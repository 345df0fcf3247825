from __future__ import annotations

import re
from typing import Iterable

from werkzeug.datastructures import Headers

# RFC 7230 token characters.
_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class HeaderError(ValueError):
    pass


def parse_header_token(token: str) -> tuple[str, str]:
    name, sep, value = str(token).partition(":")
    if not sep:
        raise HeaderError(f"Invalid header {token!r}: missing ':'")
    if not _TOKEN_RE.match(name):
        raise HeaderError(f"Invalid header {token!r}: bad header name {name!r}")
    value = value.strip()
    if "\r" in value or "\n" in value:
        raise HeaderError(f"Invalid header {token!r}: value contains a line break")
    # Response headers go out as latin-1; this puts the UTF-8 bytes on the wire unchanged.
    value = value.encode("utf-8", "surrogateescape").decode("latin-1")
    return name, value


def parse_header_args(tokens: Iterable[str]) -> Headers:
    """Accumulate ``name:value`` tokens into a multi-valued header mapping.

    Repeated names append instead of replacing, so the order of values for a
    name follows the order of the tokens.
    """
    headers = Headers()
    for token in tokens:
        name, value = parse_header_token(token)
        headers.add(name, value)
    return headers
