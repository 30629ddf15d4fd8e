#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import logging
from typing import Final

from netmon.dependencies import show_feature_warning
from netmon.transport import TCPTransport, TransportError, TransportProto
from netmon.utils.log import VERBOSE

from ._request import HTTPRequest, render_request
from ._response import HTTPResponse, parse_response

__all__ = ["http_get", "http_get_auth", "HTTPClient"]

_logger = logging.getLogger("netmon.http_client")


class HTTPClient:
    """Minimal HTTP/1.1 GET over a fresh connection per request.

    Network level failures never raise. They are reported as status code 0,
    which is the one condition every plug-in checks for. Invalid requests are
    a programming error and are rejected when the HTTPRequest is built.
    """

    def __init__(self, transport: TransportProto | None = None) -> None:
        self.transport: Final = TCPTransport() if transport is None else transport

    def get(self, request: HTTPRequest) -> HTTPResponse:
        if request.use_tls and not self.transport.tls.available:
            show_feature_warning(
                "HTTPS", f"{self.transport.tls.reason}. Sending request unencrypted."
            )
            request = request.model_copy(update={"use_tls": False})

        _logger.debug(
            "GET %s://%s%s (%ss timeout)",
            request.scheme,
            request.host_header,
            request.path,
            request.timeout,
        )
        try:
            raw = self.transport.exchange(
                request.host,
                request.port,
                render_request(request),
                timeout=request.timeout,
                use_tls=request.use_tls,
            )
        except TransportError as e:
            _logger.log(VERBOSE, "Request to %s:%d failed: %s", request.host, request.port, e)
            return HTTPResponse.from_error(str(e))

        response = parse_response(raw)
        _logger.debug(
            "Got status %d with %d characters of body", response.status_code, len(response.body)
        )
        return response


def http_get(
    host: str,
    port: int,
    path: str,
    use_tls: bool,
    timeout: float,
    *,
    client: HTTPClient | None = None,
) -> HTTPResponse:
    return http_get_auth(host, port, path, use_tls, timeout, None, None, client=client)


def http_get_auth(
    host: str,
    port: int,
    path: str,
    use_tls: bool,
    timeout: float,
    username: str | None,
    password: str | None,
    *,
    client: HTTPClient | None = None,
) -> HTTPResponse:
    request = HTTPRequest(
        host=host,
        port=port,
        path=path,
        use_tls=use_tls,
        timeout=timeout,
        username=username or None,
        password=password,
    )
    return (HTTPClient() if client is None else client).get(request)
