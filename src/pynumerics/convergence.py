"""Iteration trace recorded by a root-finding run."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Iterator, List, Optional

import numpy as np


@dataclass(frozen=True)
class IterationRecord:
    """State of one root-finding iteration.

    Attributes
    ----------
    iteration : int
        1-based iteration index.
    estimate : float
        Point evaluated during the iteration (the midpoint for bisection).
    function_value : float
        ``f(estimate)``.
    step : float
        Signed change applied to the estimate, or the bracket half-width for
        bisection.  ``nan`` when the iteration failed before taking a step.
    """

    iteration: int
    estimate: float
    function_value: float
    step: float


class ConvergenceLog:
    """Ordered, append-only sequence of :class:`IterationRecord`.

    Examples
    --------
    >>> log = ConvergenceLog()
    >>> log.append(IterationRecord(1, 2.0, 4.0, -1.0))
    >>> len(log)
    1
    >>> log.last.estimate
    2.0
    """

    def __init__(self):
        self._records: List[IterationRecord] = []

    def append(self, record: IterationRecord) -> None:
        """Add one record; iteration indices must be non-decreasing."""
        if self._records and record.iteration < self._records[-1].iteration:
            raise ValueError(
                f"Iteration {record.iteration} recorded after "
                f"iteration {self._records[-1].iteration}"
            )
        self._records.append(record)

    def clear(self) -> None:
        """Remove all records."""
        self._records.clear()

    def copy(self) -> "ConvergenceLog":
        """Return an independent log holding the same records."""
        other = ConvergenceLog()
        other._records = list(self._records)
        return other

    @property
    def records(self) -> tuple:
        """Snapshot of all records, oldest first."""
        return tuple(self._records)

    @property
    def last(self) -> Optional[IterationRecord]:
        """Most recent record, or None if the log is empty."""
        return self._records[-1] if self._records else None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[IterationRecord]:
        return iter(tuple(self._records))

    def __getitem__(self, index):
        return self._records[index]

    def to_array(self) -> np.ndarray:
        """Return the log as an ``(n, 4)`` float array.

        Columns are ``iteration, estimate, function_value, step``.
        """
        if not self._records:
            return np.empty((0, 4))
        return np.array([astuple(r) for r in self._records], dtype=float)

    def format_table(self) -> str:
        """Render the log as a fixed-width text table."""
        lines = [
            f"{'Iteration':<10} {'x':<24} {'f(x)':<24} {'Step':<15}",
            f"{'-' * 9:<10} {'-' * 23:<24} {'-' * 23:<24} {'-' * 14:<15}",
        ]
        for r in self._records:
            lines.append(
                f"{r.iteration:<10} {r.estimate:<24.15g} "
                f"{r.function_value:<24.15g} {r.step:<15.6e}"
            )
        return "\n".join(lines)

    def display(self) -> None:
        """Print the log table to stdout."""
        print(self.format_table())

    def __repr__(self) -> str:
        return f"ConvergenceLog(records={len(self._records)})"
