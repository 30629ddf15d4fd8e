#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import contextlib
import logging
import socket
import time
from collections.abc import Iterator, Sequence
from typing import Final, Protocol

from netmon.utils.exceptions import ConnectError, ResolveError, TransportError

from ._tls import TLSCapability, wrap_tls

__all__ = [
    "AddressInfo",
    "connect",
    "Connection",
    "resolve",
    "TCPTransport",
    "TransportProto",
]

_logger = logging.getLogger("netmon.transport")

_RECV_SIZE: Final = 8192

AddressInfo = tuple[socket.AddressFamily, socket.SocketKind, int, str, tuple]


class TransportProto(Protocol):
    tls: TLSCapability

    def exchange(self, host: str, port: int, payload: bytes, *, timeout: float, use_tls: bool) -> bytes: ...


def resolve(host: str, port: int) -> Sequence[AddressInfo]:
    """Resolve to IPv4 and IPv6 stream addresses, in resolver order."""
    try:
        return socket.getaddrinfo(host, port, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except (OSError, UnicodeError) as e:
        raise ResolveError(f"Cannot resolve host '{host}': {e}") from e


class Connection:
    def __init__(self, sock: socket.socket, peer: tuple, timeout: float) -> None:
        self._socket: Final = sock
        self.peer: Final = peer
        self.timeout: Final = timeout

    def __repr__(self) -> str:
        return f"{type(self).__name__}(peer={self.peer!r}, timeout={self.timeout!r})"

    def send(self, data: bytes) -> None:
        self._socket.settimeout(self.timeout)
        try:
            self._socket.sendall(data)
        except OSError as e:
            raise TransportError(f"Sending to {self.peer[0]}:{self.peer[1]} failed: {e}") from e

    def read_all(self, timeout: float | None = None) -> bytes:
        """Read until the peer closes the connection or the deadline elapses.

        Whatever arrived before the deadline is returned.
        """
        deadline = time.monotonic() + (self.timeout if timeout is None else timeout)
        buffer = bytearray()
        while (remaining := deadline - time.monotonic()) > 0:
            self._socket.settimeout(remaining)
            try:
                data = self._socket.recv(_RECV_SIZE)
            except TimeoutError:
                break
            except OSError as e:
                raise TransportError(f"Communication failed: {e}") from e
            if not data:
                return bytes(buffer)
            buffer += data

        _logger.debug(
            "Read timeout from %s:%d after %d bytes", self.peer[0], self.peer[1], len(buffer)
        )
        return bytes(buffer)


def _open_first(addresses: Sequence[AddressInfo], deadline: float) -> tuple[socket.socket, tuple]:
    errors = []
    for family, kind, proto, _canonname, sockaddr in addresses:
        if (remaining := deadline - time.monotonic()) <= 0:
            errors.append("timed out")
            break
        sock: socket.socket | None = None
        try:
            # e.g. EAFNOSUPPORT for IPv6 addresses on IPv4 only hosts
            sock = socket.socket(family, kind, proto)
            sock.settimeout(remaining)
            sock.connect(sockaddr)
        except OSError as e:
            if sock is not None:
                sock.close()
            _logger.debug("Connecting to %s failed: %s", sockaddr[0], e)
            errors.append(f"{sockaddr[0]}: {e}")
            continue
        return sock, sockaddr
    raise ConnectError("Connection failed (%s)" % "; ".join(errors or ["no address"]))


@contextlib.contextmanager
def connect(host: str, port: int, timeout: float, *, use_tls: bool = False) -> Iterator[Connection]:
    """Open exactly one connection and close it on every exit path."""
    addresses = resolve(host, port)
    _logger.debug("Connecting via TCP to %s:%d (%ss timeout)", host, port, timeout)
    sock, peer = _open_first(addresses, time.monotonic() + timeout)
    try:
        if use_tls:
            sock.settimeout(timeout)
            sock = wrap_tls(sock, host)
        yield Connection(sock, peer, timeout)
    finally:
        _logger.debug("Closing TCP connection to %s:%d", peer[0], peer[1])
        sock.close()


class TCPTransport:
    """Stateless socket transport, safe to share between threads."""

    def __init__(self, tls: TLSCapability | None = None) -> None:
        self.tls: Final = TLSCapability.detect() if tls is None else tls

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tls={self.tls!r})"

    def exchange(self, host: str, port: int, payload: bytes, *, timeout: float, use_tls: bool) -> bytes:
        with connect(host, port, timeout, use_tls=use_tls) as connection:
            connection.send(payload)
            return connection.read_all()
