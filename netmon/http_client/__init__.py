#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Socket level HTTP GET used by the active checks.

This is deliberately not a general purpose HTTP library: no redirects, no
chunked transfer-encoding, no keep-alive.
"""

from ._client import http_get, http_get_auth, HTTPClient
from ._request import basic_auth_header, HTTPRequest, render_request, USER_AGENT
from ._response import HTTPResponse, parse_response

__all__ = [
    "basic_auth_header",
    "http_get",
    "http_get_auth",
    "HTTPClient",
    "HTTPRequest",
    "HTTPResponse",
    "parse_response",
    "render_request",
    "USER_AGENT",
]
