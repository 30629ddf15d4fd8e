#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Raw TCP and TLS transport used by the HTTP client.

See Also:
    * `netmon.http_client` for the request/response handling on top.

"""

from netmon.utils.exceptions import ConnectError, ResolveError, TLSHandshakeError, TransportError

from ._tcp import AddressInfo, connect, Connection, resolve, TCPTransport, TransportProto
from ._tls import TLSCapability, wrap_tls

__all__ = [
    "AddressInfo",
    "connect",
    "ConnectError",
    "Connection",
    "resolve",
    "ResolveError",
    "TCPTransport",
    "TLSCapability",
    "TLSHandshakeError",
    "TransportError",
    "TransportProto",
    "wrap_tls",
]
