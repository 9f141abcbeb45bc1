"""Enumerations stored as literals in ISPyB columns."""

from __future__ import annotations

from enum import Enum


class StatisticsType(Enum):
    """Resolution shell a scaling statistics row describes.

    The value is the literal stored in
    ``AutoProcScalingStatistics.scalingStatisticsType`` and is compared
    verbatim (case-sensitive) when filtering. Changing a value breaks
    compatibility with existing ISPyB rows.
    """

    OVERALL = "overall"
    INNER_SHELL = "innerShell"
    OUTER_SHELL = "outerShell"

    @classmethod
    def from_literal(cls, literal: str) -> StatisticsType:
        """Map a stored literal back to its member.

        Raises:
            ValueError: If the literal is not one of the stored values.
        """
        return cls(literal)

    def to_literal(self) -> str:
        """Literal used in SQL predicates for this member."""
        return self.value
