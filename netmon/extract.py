#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Best effort lookup of scalar values in JSON-like text.

This is intentionally not a JSON parser. The monitored services answer with
truncated documents, plain text status pages or JSON with quirks, and the
operator still wants the one value the check is about. So the lookup works
on the raw text:

* absence is never an error: the functions return "", 0.0, False or -1,
* the first textual match of a key wins, even if a different occurrence
  would be the semantically correct one,
* arrays, escaped quotes and braces inside strings are not understood.

>>> body = '{"cluster_name":"prod","status":"green","number_of_nodes":3,"timed_out":false}'
>>> extract_json_value(body, "status")
'green'
>>> extract_json_number(body, "number_of_nodes")
3.0
>>> extract_json_boolean(body, "timed_out")
False
"""

import re

__all__ = [
    "extract_json_boolean",
    "extract_json_nested_value",
    "extract_json_number",
    "extract_json_value",
    "extract_text_number",
    "json_has_key",
]

_NUMBER_PREFIX = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def _key(key: str) -> str:
    return '"%s"\\s*:\\s*' % re.escape(key)


def extract_json_value(body: str, key: str) -> str:
    """Value of the first `"key": ...` pair as text

    Quoted values are returned without the quotes. Otherwise the raw token up
    to the next "," or "}" is returned, stripped of surrounding whitespace.

    >>> extract_json_value('{"name": "node-1", "ok": true }', "ok")
    'true'
    >>> extract_json_value('<html>502 Bad Gateway</html>', "name")
    ''
    """
    if match := re.search(_key(key) + '"([^"]*)"', body):
        return match.group(1)

    if match := re.search(_key(key) + "([^,}]+)", body):
        return match.group(1).strip()

    return ""


def extract_json_nested_value(body: str, path: str) -> str:
    """Follow a dotted path through nested objects

    The object belonging to the first path segment is cut out by counting
    braces, then the rest of the path is looked up inside of it. An object
    that is never closed (truncated body) yields "".

    >>> extract_json_nested_value('{"cluster":{"health":"yellow"}}', "cluster.health")
    'yellow'
    >>> extract_json_nested_value('{"a":{"b":{"c":1}}, "c":2}', "a.b.c")
    '1'
    >>> extract_json_nested_value('{"cluster":{"health":"yel', "cluster.health")
    ''
    """
    first, dot, rest = path.partition(".")
    if not dot:
        return extract_json_value(body, path)

    if (match := re.search(_key(first) + r"\{", body)) is None:
        return ""

    start = match.end() - 1
    depth = 0
    for pos in range(start, len(body)):
        if body[pos] == "{":
            depth += 1
        elif body[pos] == "}":
            depth -= 1
            if depth == 0:
                return extract_json_nested_value(body[start : pos + 1], rest)

    return ""


def json_has_key(body: str, key: str) -> bool:
    return re.search(_key(key), body) is not None


def extract_json_number(body: str, key: str) -> float:
    """Numeric value of a key, quoted or not

    Note: a missing key gives 0.0, just like a real zero. Use json_has_key()
    if the difference matters.

    >>> extract_json_number('{"load": "1.5e2", "temp": -3.25}', "load")
    150.0
    >>> extract_json_number('{"load": "1.5e2", "temp": -3.25}', "temp")
    -3.25
    >>> extract_json_number('{"version": "7.17.3"}', "version")
    7.17
    >>> extract_json_number('{"load": null}', "load")
    0.0
    """
    if match := _NUMBER_PREFIX.match(extract_json_value(body, key)):
        return float(match.group())
    return 0.0


def extract_json_boolean(body: str, key: str) -> bool:
    """
    >>> extract_json_boolean('{"sealed": TRUE}', "sealed")
    True
    >>> extract_json_boolean('{"sealed": "1"}', "sealed")
    True
    >>> extract_json_boolean('{"sealed": "yes"}', "sealed")
    False
    """
    return extract_json_value(body, key).lower() in ("true", "1")


def extract_text_number(text: str, label: str) -> int:
    """Integer from a line oriented "Label: value" status page

    >>> page = "Total Accesses: 1200\\nBusyWorkers: 3\\nIdleWorkers: 47\\n"
    >>> extract_text_number(page, "busyworkers")
    3
    >>> extract_text_number(page, "Uptime")
    -1
    """
    if match := re.search(
        r"^[ \t]*%s[ \t]*:[ \t]*([0-9]+)" % re.escape(label), text, re.IGNORECASE | re.MULTILINE
    ):
        return int(match.group(1))
    return -1
