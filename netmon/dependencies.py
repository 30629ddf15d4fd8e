#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Tell the user about optional capabilities that are not available.

The plug-ins do not fail in that case. They print a warning to stderr and
carry on in a degraded mode, e.g. plain HTTP instead of HTTPS.
"""

import sys

from netmon.transport import TLSCapability

__all__ = ["fall_back_to_plain", "show_dependency_warning", "show_feature_warning"]


def show_dependency_warning(plugin_name: str, dependency: str, fallback: str = "") -> None:
    sys.stderr.write(f"WARNING: {plugin_name} requires {dependency} but it is not available.\n")
    if fallback:
        sys.stderr.write(f"         Falling back to: {fallback}\n")


def show_feature_warning(feature: str, reason: str) -> None:
    sys.stderr.write(f"WARNING: {feature} is not available: {reason}\n")


def fall_back_to_plain(
    plugin_name: str, use_tls: bool, port: int, capability: TLSCapability
) -> tuple[bool, int]:
    """Decide on TLS and port before the first request is made.

    >>> fall_back_to_plain("check_x", False, 443, TLSCapability.unavailable("n/a"))
    (False, 443)
    >>> fall_back_to_plain("check_x", True, 8443, TLSCapability(True, "OpenSSL 3"))
    (True, 8443)
    """
    if not use_tls or capability.available:
        return use_tls, port

    show_dependency_warning(
        plugin_name, "TLS support", "HTTP connection only (HTTPS not available)"
    )
    return False, 80 if port == 443 else port
