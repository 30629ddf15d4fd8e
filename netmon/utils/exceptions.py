#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""User-defined exceptions of the monitoring plugins."""

__all__ = [
    "ConnectError",
    "NMBailOut",
    "NMException",
    "NMGeneralException",
    "ResolveError",
    "TLSHandshakeError",
    "TransportError",
]


# never used directly in the code. Just some wrapper to make all of our
# exceptions handleable with one call
class NMException(Exception):
    pass


class NMGeneralException(NMException):
    pass


# This is raised to print an error message and then end the program.
# The plug-in main catches this at top level and exits with code 3, in order
# to be compatible with the monitoring plug-in API.
class NMBailOut(NMException):
    pass


class TransportError(NMException):
    """Sending or receiving on an established connection failed."""


class ResolveError(TransportError):
    """The host name could not be resolved to any address."""


class ConnectError(TransportError):
    """None of the resolved addresses accepted the connection."""


class TLSHandshakeError(ConnectError):
    pass
