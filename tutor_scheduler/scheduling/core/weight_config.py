"""
Typed view of a teacher's ranking preferences.

The stored row keeps ``preferred_times`` as free-form JSON; everything past the
data access layer works with these classes instead.
"""

from typing import Dict, Iterator, List, Optional, Tuple
from .constants import (
    PERIOD_ORDER,
    DEFAULT_W_TIME,
    DEFAULT_W_COMPACT,
    DEFAULT_W_PRIORITY,
    DEFAULT_WORKING_DAYS,
    DEFAULT_PREFERRED_TIMES,
    DEFAULT_MIN_GAP_MINUTES,
    DEFAULT_MAX_GAP_MINUTES,
    DEFAULT_GAP_IMPORTANCE,
)


class PeriodPreference:
    def __init__(self, enabled: bool = False, weight: float = 0.5):
        self.enabled = bool(enabled)
        self.weight = float(weight)

    @classmethod
    def from_dict(cls, data: Optional[dict], default: dict) -> "PeriodPreference":
        data = data or {}
        return cls(
            enabled=data.get("enabled", default["enabled"]),
            weight=data.get("weight", default["weight"]),
        )

    def to_dict(self) -> dict:
        return {"enabled": self.enabled, "weight": self.weight}

    def __eq__(self, other):
        if not isinstance(other, PeriodPreference):
            return NotImplemented
        return self.enabled == other.enabled and self.weight == other.weight

    def __repr__(self):
        return f"PeriodPreference(enabled={self.enabled}, weight={self.weight})"


class PreferredTimes:
    """The three known day periods, each independently enabled and weighted."""

    def __init__(
        self,
        morning: Optional[PeriodPreference] = None,
        day: Optional[PeriodPreference] = None,
        evening: Optional[PeriodPreference] = None,
    ):
        self.morning = morning or PeriodPreference(**DEFAULT_PREFERRED_TIMES["morning"])
        self.day = day or PeriodPreference(**DEFAULT_PREFERRED_TIMES["day"])
        self.evening = evening or PeriodPreference(**DEFAULT_PREFERRED_TIMES["evening"])

    def periods(self) -> Iterator[Tuple[str, PeriodPreference]]:
        """Yield (name, preference) in morning -> day -> evening order."""
        for name in PERIOD_ORDER:
            yield name, getattr(self, name)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "PreferredTimes":
        # Older rows also carry a redundant "period" key per entry; it is ignored
        data = data or {}
        return cls(**{
            name: PeriodPreference.from_dict(data.get(name), DEFAULT_PREFERRED_TIMES[name])
            for name in PERIOD_ORDER
        })

    def to_dict(self) -> Dict[str, dict]:
        return {name: pref.to_dict() for name, pref in self.periods()}


class WeightConfig:
    """
    Ranking weights and preferences for one teacher.

    The three base weights are expected to add up to roughly 1.0, but this is
    not enforced.
    """

    def __init__(
        self,
        w_time: float = DEFAULT_W_TIME,
        w_compact: float = DEFAULT_W_COMPACT,
        w_priority: float = DEFAULT_W_PRIORITY,
        working_days: Optional[List[int]] = None,
        preferred_times: Optional[PreferredTimes] = None,
        min_gap_minutes: int = DEFAULT_MIN_GAP_MINUTES,
        max_gap_minutes: int = DEFAULT_MAX_GAP_MINUTES,
        gap_importance: float = DEFAULT_GAP_IMPORTANCE,
    ):
        self.w_time = w_time
        self.w_compact = w_compact
        self.w_priority = w_priority
        self.working_days = set(working_days if working_days is not None else DEFAULT_WORKING_DAYS)
        self.preferred_times = preferred_times or PreferredTimes()
        self.min_gap_minutes = min_gap_minutes
        self.max_gap_minutes = max_gap_minutes
        self.gap_importance = gap_importance

    @property
    def weight_sum(self) -> float:
        return self.w_time + self.w_compact + self.w_priority

    @classmethod
    def from_row(cls, row) -> "WeightConfig":
        """
        Build a config from a ``SlotWeight`` row, falling back to defaults for
        empty columns the same way the settings screen does.
        """
        return cls(
            w_time=row.w_time if row.w_time is not None else DEFAULT_W_TIME,
            w_compact=row.w_compact if row.w_compact is not None else DEFAULT_W_COMPACT,
            w_priority=row.w_priority if row.w_priority is not None else DEFAULT_W_PRIORITY,
            working_days=row.working_days or DEFAULT_WORKING_DAYS,
            preferred_times=PreferredTimes.from_dict(row.preferred_times),
            min_gap_minutes=row.min_gap_minutes if row.min_gap_minutes is not None else DEFAULT_MIN_GAP_MINUTES,
            max_gap_minutes=row.max_gap_minutes or DEFAULT_MAX_GAP_MINUTES,
            gap_importance=row.gap_importance or DEFAULT_GAP_IMPORTANCE,
        )

    def to_dict(self) -> dict:
        return {
            "wTime": self.w_time,
            "wCompact": self.w_compact,
            "wPriority": self.w_priority,
            "workingDays": sorted(self.working_days),
            "preferredTimes": self.preferred_times.to_dict(),
            "minGapMinutes": self.min_gap_minutes,
            "maxGapMinutes": self.max_gap_minutes,
            "gapImportance": self.gap_importance,
        }

    def __repr__(self):
        return (
            f"WeightConfig(w_time={self.w_time}, w_compact={self.w_compact}, w_priority={self.w_priority}, "
            f"working_days={sorted(self.working_days)}, gaps={self.min_gap_minutes}-{self.max_gap_minutes}, "
            f"gap_importance={self.gap_importance})"
        )
