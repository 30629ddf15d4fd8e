#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Look up credentials in a password store file.

Plug-ins accept a reference of the form ``ID:FILE`` instead of a plain
password on the command line, so that the secret does not show up in the
process list. The file contains one ``ident:password`` entry per line.
"""

from pathlib import Path

from netmon.utils.exceptions import NMGeneralException

__all__ = ["load", "lookup", "split_reference"]


def load(pw_file: Path) -> dict[str, str]:
    passwords = {}
    try:
        content = pw_file.read_text(encoding="utf-8")
    except OSError as e:
        raise NMGeneralException(f"Cannot read password store {pw_file}: {e}") from e

    for lineno, line in enumerate(content.splitlines(), start=1):
        if not line.strip() or line.startswith("#"):
            continue
        ident, sep, password = line.partition(":")
        if not sep:
            raise NMGeneralException(f"Invalid entry in password store {pw_file}, line {lineno}")
        passwords[ident] = password
    return passwords


def lookup(pw_file: Path, pw_id: str) -> str:
    try:
        return load(pw_file)[pw_id]
    except KeyError:
        raise NMGeneralException(f"Password '{pw_id}' does not exist in {pw_file}")


def split_reference(reference: str) -> tuple[str, Path]:
    """
    >>> split_reference("es_admin:/etc/netmon/passwords")
    ('es_admin', PosixPath('/etc/netmon/passwords'))
    """
    pw_id, sep, file = reference.partition(":")
    if not sep or not pw_id or not file:
        raise ValueError(f"Invalid password reference {reference!r}, expected ID:FILE")
    return pw_id, Path(file)
