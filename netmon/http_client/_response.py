#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["HTTPResponse", "parse_response"]

_HEADER_END = b"\r\n\r\n"


@dataclass(frozen=True)
class HTTPResponse:
    """Outcome of one GET request.

    A status code of 0 means the exchange could not be completed (nothing
    resolved, nothing listening, the peer hung up mid-response, ...). In that
    case ``error`` may tell why.
    """

    status_code: int = 0
    body: str = ""
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.status_code == 0 or not self.body

    @classmethod
    def from_error(cls, error: str) -> HTTPResponse:
        return cls(0, "", error)


def _parse_status_code(status_line: str) -> int:
    """
    >>> _parse_status_code("HTTP/1.1 503 Service Unavailable")
    503
    >>> _parse_status_code("HTTP/1.0 200")
    200
    >>> _parse_status_code("SSH-2.0-OpenSSH_9.6")
    0
    """
    if not status_line.startswith("HTTP/"):
        return 0
    try:
        return int(status_line.split()[1])
    except (IndexError, ValueError):
        return 0


def parse_response(raw: bytes) -> HTTPResponse:
    """Split a raw response at the first empty line.

    Without that boundary the response is considered incomplete: status
    code 0 and no body, even if a status line arrived.

    >>> parse_response(b"HTTP/1.1 200 OK\\r\\nServer: x\\r\\n\\r\\npong")
    HTTPResponse(status_code=200, body='pong', error=None)
    >>> parse_response(b"HTTP/1.1 200 OK\\r\\nContent-Le")
    HTTPResponse(status_code=0, body='', error='Incomplete response (27 bytes)')
    """
    if not raw:
        return HTTPResponse.from_error("Empty response")

    head, sep, body = raw.partition(_HEADER_END)
    if not sep:
        return HTTPResponse.from_error(f"Incomplete response ({len(raw)} bytes)")

    status_line = head.split(b"\r\n", 1)[0].decode("latin-1").strip()
    return HTTPResponse(
        status_code=_parse_status_code(status_line),
        body=body.decode("utf-8", errors="replace"),
    )
