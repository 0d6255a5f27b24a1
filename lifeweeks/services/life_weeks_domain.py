"""Pure domain logic for the Life in Weeks calculator.

No I/O: only the week accounting, the derived grid of week cells, and the
summary text shown under the progress bar.
"""

import math
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union

WEEKS_PER_YEAR = 52
SLEEP_FRACTION = 0.33
DAYS_PER_YEAR = 365.25
# Week counts saturate here instead of overflowing
MAX_WEEKS = sys.maxsize

Number = Union[int, float]


@dataclass(frozen=True)
class WeekBreakdown:
    """Lived, remaining, sleeping and awake weeks for one (age, expectancy) pair."""

    weeks_lived: int
    total_weeks: int
    remaining_weeks: int
    sleep_weeks: int
    awake_weeks: int
    percentage_lived: float

    @property
    def grid_length(self) -> int:
        return self.weeks_lived + self.sleep_weeks + self.awake_weeks

    @property
    def sleep_years(self) -> float:
        return self.sleep_weeks / WEEKS_PER_YEAR

    @property
    def awake_years(self) -> float:
        return self.awake_weeks / WEEKS_PER_YEAR

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase names the front-end reads."""
        return {
            "weeksLived": self.weeks_lived,
            "totalWeeks": self.total_weeks,
            "remainingWeeks": self.remaining_weeks,
            "sleepWeeks": self.sleep_weeks,
            "awakeWeeks": self.awake_weeks,
            "percentageLived": self.percentage_lived,
        }


def _to_weeks(years: Number) -> int:
    weeks = years * WEEKS_PER_YEAR
    if math.isnan(weeks):
        return 0
    return math.floor(max(-MAX_WEEKS, min(MAX_WEEKS, weeks)))


def compute_weeks(current_age: Number, life_expectancy: Number) -> WeekBreakdown:
    """Break a life into lived, sleeping and awake weeks.

    Args:
        current_age: Age in years, fractional values allowed.
        life_expectancy: Expected lifespan in years.

    Returns:
        WeekBreakdown with every count floored. ``awake_weeks`` is the
        remainder after sleep so the two always add up to ``remaining_weeks``.
        Counts saturate at ``MAX_WEEKS`` for huge inputs.
    """
    weeks_lived = _to_weeks(current_age)
    total_weeks = _to_weeks(life_expectancy)
    remaining_weeks = max(0, total_weeks - weeks_lived)
    sleep_weeks = math.floor(remaining_weeks * SLEEP_FRACTION)
    awake_weeks = remaining_weeks - sleep_weeks

    if total_weeks > 0:
        percentage_lived = max(0.0, min(100.0, weeks_lived / total_weeks * 100))
    else:
        percentage_lived = 0.0

    return WeekBreakdown(
        weeks_lived=weeks_lived,
        total_weeks=total_weeks,
        remaining_weeks=remaining_weeks,
        sleep_weeks=sleep_weeks,
        awake_weeks=awake_weeks,
        percentage_lived=percentage_lived,
    )


def clamp_non_negative(value: Number) -> Number:
    """Clamp a user-entered age or expectancy to >= 0 before computing."""
    return value if value > 0 else 0


class CellState(str, Enum):
    LIVED = "lived"
    FUTURE = "future"


@dataclass(frozen=True)
class WeekCell:
    """One square of the grid."""

    index: int
    state: CellState

    @property
    def year(self) -> int:
        return self.index // WEEKS_PER_YEAR + 1

    @property
    def label(self) -> str:
        return f"Week {self.index + 1} ({self.year} years)"


class WeekCells(Sequence):
    """Lazy view over the grid cells of a breakdown.

    Cells are built on access, so iterating twice starts over and nothing is
    stored beyond the breakdown itself.
    """

    def __init__(self, breakdown: WeekBreakdown):
        self._breakdown = breakdown

    def __len__(self) -> int:
        return self._breakdown.grid_length

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("week cell index out of range")
        return self._cell(index)

    def __iter__(self) -> Iterator[WeekCell]:
        for i in range(len(self)):
            yield self._cell(i)

    def _cell(self, index: int) -> WeekCell:
        if index < self._breakdown.weeks_lived:
            return WeekCell(index, CellState.LIVED)
        return WeekCell(index, CellState.FUTURE)


def week_cells(breakdown: WeekBreakdown) -> WeekCells:
    """Return the grid cells for a breakdown: lived first, then future."""
    return WeekCells(breakdown)


def format_summary(breakdown: WeekBreakdown) -> str:
    """Format the one-paragraph summary shown under the progress bar."""
    return (
        f"You've lived {breakdown.percentage_lived:.1f}% of your expected life span. "
        f"Of your remaining time, you'll spend about {breakdown.sleep_years:.1f} "
        f"years sleeping and {breakdown.awake_years:.1f} years awake."
    )


def age_from_birth_date(
    birth_date: date, reference_date: Optional[date] = None
) -> float:
    """Calculate age in fractional years from a birth date.

    Args:
        birth_date: The user's date of birth.
        reference_date: Date to calculate from (defaults to today).

    Returns:
        Age in years, suitable as ``current_age`` for :func:`compute_weeks`.

    Raises:
        ValueError: If birth_date is in the future.
        TypeError: If birth_date is None.
    """
    if birth_date is None:
        raise TypeError("birth_date cannot be None")

    if reference_date is None:
        reference_date = date.today()

    if birth_date > reference_date:
        raise ValueError(
            f"birth_date ({birth_date}) cannot be in the future "
            f"relative to reference_date ({reference_date})"
        )

    return (reference_date - birth_date).days / DAYS_PER_YEAR
