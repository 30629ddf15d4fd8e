#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import dataclasses
import enum
import sys
from collections.abc import Sequence
from typing import TextIO

__all__ = [
    "add_state_marker",
    "CheckResult",
    "output_check_result",
    "render_metric",
    "State",
    "state_markers",
    "worst_state",
]


class State(enum.IntEnum):
    """Service states. The values are the plug-in exit codes."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


# Symbolic representations of states in plug-in output
state_markers = ("", "(!)", "(!!)", "(?)")

_BADNESS = {State.OK: 0, State.WARNING: 1, State.UNKNOWN: 2, State.CRITICAL: 3}


def add_state_marker(txt: str, state: State) -> str:
    """
    >>> add_state_marker("Database: down", State.CRITICAL)
    'Database: down(!!)'
    """
    marker = state_markers[state]
    return txt if txt.endswith(marker) else f"{txt}{marker}"


def worst_state(*states: State, default: State = State.OK) -> State:
    """Return the 'worst' aggregation of all states

    The order of "badness" is OK -> WARNING -> UNKNOWN -> CRITICAL, which is
    not the order of the exit codes. That's why this function is just not
    quite `max`.

    >>> worst_state(State.OK, State.WARNING, State.UNKNOWN).name
    'UNKNOWN'
    >>> worst_state(State.UNKNOWN, State.CRITICAL).name
    'CRITICAL'
    >>> worst_state().name
    'OK'
    """
    return max(states, key=_BADNESS.__getitem__, default=default)


def _render_number(value: float | None) -> str:
    """
    >>> [_render_number(v) for v in (None, 3, 3.0, 0.25, 1e-7)]
    ['', '3', '3', '0.25', '0.0000001']
    """
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return ("%.7f" % value).rstrip("0").rstrip(".")


def render_metric(
    name: str,
    value: float,
    *,
    unit: str = "",
    levels: tuple[float | None, float | None] = (None, None),
    boundaries: tuple[float | None, float | None] = (None, None),
) -> str:
    """One performance data token: name=value[unit][;warn;crit[;min;max]]

    >>> render_metric("nodes", 3)
    'nodes=3'
    >>> render_metric("temp", 90.5, levels=(70, 85))
    'temp=90.5;70;85'
    >>> render_metric("free", 7, unit="%", levels=(None, 5), boundaries=(0, 100))
    'free=7%;;5;0;100'
    >>> render_metric("data nodes", 2)
    "'data nodes'=2"
    """
    label = f"'{name}'" if (" " in name or "=" in name) else name
    fields = [
        f"{_render_number(value)}{unit}",
        *(_render_number(v) for v in levels),
        *(_render_number(v) for v in boundaries),
    ]
    while len(fields) > 1 and not fields[-1]:
        fields.pop()
    return f"{label}={';'.join(fields)}"


@dataclasses.dataclass(frozen=True)
class CheckResult:
    state: State = State.OK
    message: str = ""
    metrics: Sequence[str] = ()

    def __post_init__(self) -> None:
        # accept plain ints, e.g. from a subprocess exit code
        object.__setattr__(self, "state", State(self.state))
        object.__setattr__(self, "metrics", tuple(self.metrics))

    @property
    def perfdata(self) -> str:
        return " ".join(self.metrics)

    def as_text(self) -> str:
        """
        >>> CheckResult(State.WARNING, "Cluster status: yellow", ("nodes=3",)).as_text()
        'WARNING: Cluster status: yellow | nodes=3'
        >>> CheckResult(State.OK, "a|b").as_text()
        'OK: a❘b'
        """
        line = f"{self.state.name}: {self._replace_pipe(self.message)}"
        return f"{line} | {self.perfdata}" if self.metrics else line

    @classmethod
    def from_subresults(cls, *subresults: CheckResult) -> CheckResult:
        """Combine the results of several checked items into one line"""
        return cls(
            state=worst_state(*(s.state for s in subresults)),
            message=", ".join(
                add_state_marker(s.message, s.state) for s in subresults if s.message
            ),
            metrics=tuple(m for s in subresults for m in s.metrics),
        )

    @staticmethod
    def _replace_pipe(txt: str) -> str:
        """The vertical bar indicates end of service output and start of metrics.
        Replace the ones in the output by a Unicode "Light vertical bar"
        """
        return txt.replace("|", "❘")


def output_check_result(result: CheckResult, stream: TextIO | None = None) -> None:
    (sys.stdout if stream is None else stream).write("%s\n" % result.as_text())
