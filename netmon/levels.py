#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Warning and critical levels and their evaluation.

Every check classifies its measured value the same way: the critical level
is looked at first, then the warning level, the first breached level wins.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from netmon.checkresults import add_state_marker, CheckResult, render_metric, State

__all__ = ["Bound", "check_levels", "Direction", "evaluate", "Levels", "parse_bound"]

_BOUND_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+))\s*(%?)\s*$")


class Direction(enum.Enum):
    LOWER = "lower"  # below the level is bad, e.g. free disk space
    UPPER = "upper"  # at or above the level is bad, e.g. load, temperature


@dataclass(frozen=True)
class Bound:
    value: float
    percent: bool = False

    def __str__(self) -> str:
        return f"{self.value:g}%" if self.percent else f"{self.value:g}"

    def is_breached(self, value: float, direction: Direction, total: float | None) -> bool:
        if self.percent and total:
            value = value * 100.0 / total
        if direction is Direction.LOWER:
            return value < self.value
        return value >= self.value

    def absolute(self, total: float | None) -> float:
        """The level in the unit of the measured value, for the metrics"""
        if self.percent and total:
            return self.value * total / 100.0
        return self.value


def parse_bound(text: str) -> Bound:
    """Parse a level given on the command line

    >>> parse_bound("10%")
    Bound(value=10.0, percent=True)
    >>> parse_bound(" 85.5 ")
    Bound(value=85.5, percent=False)
    >>> parse_bound("ten")
    Traceback (most recent call last):
        ...
    ValueError: invalid level: 'ten'
    """
    if (match := _BOUND_RE.match(text)) is None:
        raise ValueError(f"invalid level: {text!r}")
    return Bound(float(match.group(1)), percent=bool(match.group(2)))


@dataclass(frozen=True)
class Levels:
    warn: Bound | None = None
    crit: Bound | None = None

    @classmethod
    def from_values(cls, warn: float | None, crit: float | None) -> Levels:
        return cls(
            None if warn is None else Bound(warn),
            None if crit is None else Bound(crit),
        )


def evaluate(
    value: float,
    levels: Levels,
    direction: Direction,
    *,
    total: float | None = None,
) -> State:
    """Classify a value, critical first

    A percentage level is compared against value * 100 / total if a total is
    given, otherwise the value is expected to be a percentage already. There
    is no "not found" input: the caller has to decide on UNKNOWN before.

    >>> evaluate(7, Levels(Bound(10, True), Bound(5, True)), Direction.LOWER).name
    'WARNING'
    >>> evaluate(90, Levels.from_values(70, 85), Direction.UPPER).name
    'CRITICAL'
    >>> evaluate(2, Levels(Bound(10, True), Bound(5, True)), Direction.LOWER, total=50).name
    'CRITICAL'
    """
    if levels.crit is not None and levels.crit.is_breached(value, direction, total):
        return State.CRITICAL
    if levels.warn is not None and levels.warn.is_breached(value, direction, total):
        return State.WARNING
    return State.OK


def check_levels(
    value: float,
    levels: Levels,
    direction: Direction,
    *,
    label: str,
    metric_name: str | None = None,
    unit: str = "",
    total: float | None = None,
    boundaries: tuple[float | None, float | None] = (None, None),
) -> CheckResult:
    """Generic function for checking a value against levels

    value:       currently measured value
    metric_name: name of the metric for the value or None in order to skip
                 the metrics
    label:       title of the value in the plug-in output
    unit:        unit to be displayed in the output and the metrics
    total:       reference for percentage levels
    boundaries:  minimum and maximum added to the metrics

    >>> check_levels(90, Levels.from_values(70, 85), Direction.UPPER, label="Temperature",
    ...              metric_name="temp", unit="C").as_text()
    'CRITICAL: Temperature: 90C (warn/crit at 70/85)(!!) | temp=90C;70;85'
    """
    state = evaluate(value, levels, direction, total=total)
    message = f"{label}: {_render(value)}{unit}"
    if state is not State.OK:
        which = "below" if direction is Direction.LOWER else "at"
        message += f" (warn/crit {which} {_render_bound(levels.warn)}/{_render_bound(levels.crit)})"
        message = add_state_marker(message, state)

    metrics: tuple[str, ...] = ()
    if metric_name is not None:
        metrics = (
            render_metric(
                metric_name,
                value,
                unit=unit,
                levels=(
                    None if levels.warn is None else levels.warn.absolute(total),
                    None if levels.crit is None else levels.crit.absolute(total),
                ),
                boundaries=boundaries,
            ),
        )
    return CheckResult(state, message, metrics)


def _render(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"


def _render_bound(bound: Bound | None) -> str:
    return "-" if bound is None else str(bound)
