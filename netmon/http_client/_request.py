#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import base64
from typing import Final

from pydantic import BaseModel, Field, field_validator

from netmon import __version__

__all__ = ["basic_auth_header", "HTTPRequest", "render_request", "USER_AGENT"]

USER_AGENT: Final = f"netmon-plugins/{__version__}"

_DEFAULT_PORTS: Final = {False: 80, True: 443}


class HTTPRequest(BaseModel, frozen=True):
    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    path: str = "/"
    use_tls: bool = False
    timeout: float = Field(default=10.0, gt=0)
    username: str | None = None
    password: str | None = None

    @field_validator("host", "path", "username", "password")
    @classmethod
    def _no_line_breaks(cls, value: str | None) -> str | None:
        if value is not None and ("\r" in value or "\n" in value):
            raise ValueError("must not contain line breaks")
        return value

    @field_validator("path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not value.startswith("/") or " " in value:
            raise ValueError("must start with '/' and must not contain spaces")
        return value

    @property
    def scheme(self) -> str:
        return "https" if self.use_tls else "http"

    @property
    def host_header(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port == _DEFAULT_PORTS[self.use_tls]:
            return host
        return f"{host}:{self.port}"


def basic_auth_header(username: str, password: str) -> str:
    """
    >>> basic_auth_header("Aladdin", "open sesame")
    'Basic QWxhZGRpbjpvcGVuIHNlc2FtZQ=='
    """
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def render_request(request: HTTPRequest) -> bytes:
    lines = [
        f"GET {request.path} HTTP/1.1",
        f"Host: {request.host_header}",
        "Connection: close",
        f"User-Agent: {USER_AGENT}",
        "Accept: application/json, text/plain, */*",
    ]
    if request.username:
        lines.append(f"Authorization: {basic_auth_header(request.username, request.password or '')}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")
