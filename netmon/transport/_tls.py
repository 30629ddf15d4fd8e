#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import importlib
import ipaddress
import socket
from dataclasses import dataclass
from types import ModuleType

from netmon.utils.exceptions import TLSHandshakeError

__all__ = ["TLSCapability", "wrap_tls"]


@dataclass(frozen=True)
class TLSCapability:
    """Whether this interpreter can speak TLS at all.

    The capability is determined at runtime and handed to the transport at
    construction. Without it, plug-ins warn and fall back to plain HTTP.
    """

    available: bool
    reason: str = ""

    @classmethod
    def detect(cls) -> TLSCapability:
        try:
            ssl = _import_ssl()
        except ImportError as e:
            return cls(False, f"Python was built without TLS support ({e})")
        return cls(True, ssl.OPENSSL_VERSION)

    @classmethod
    def unavailable(cls, reason: str) -> TLSCapability:
        return cls(False, reason)


def _import_ssl() -> ModuleType:
    return importlib.import_module("ssl")


def _is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def wrap_tls(sock: socket.socket, server_hostname: str) -> socket.socket:
    """Perform the TLS handshake on a connected socket.

    Certificates are deliberately not validated: self-signed and expired
    certificates are accepted. Checking the certificate itself is the job of
    a dedicated certificate check, not of the connectivity checks.
    """
    ssl = _import_ssl()
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    try:
        # SNI only makes sense for names, not for address literals
        return ctx.wrap_socket(
            sock,
            server_hostname=None if _is_ip_address(server_hostname) else server_hostname,
        )
    except (ssl.SSLError, OSError) as e:
        raise TLSHandshakeError(f"Error establishing TLS connection: {e}") from e
