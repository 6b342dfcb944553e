"""
Tutor Scheduler slot ranking engine

Pure scoring and conflict detection for client-proposed lesson times.
Nothing in this package touches the database; services feed it snapshots.
"""

from .core.constants import LessonStatus
from .core.time_slot import CandidateSlot, LessonInterval
from .core.weight_config import WeightConfig, PreferredTimes, PeriodPreference
from .core.ranked_slot import RankedSlot
from .core.ranker import rank_candidate_slots
from .constraints.conflicts import find_conflicts, intervals_overlap

__version__ = "1.0.0"
