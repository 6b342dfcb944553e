"""
Data access for per-teacher ranking weights.
"""

import copy
import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ..exceptions import BadRequestError
from ..models import SlotWeight
from ..schemas import SlotWeightUpdate
from ..scheduling.core.constants import (
    DEFAULT_W_TIME,
    DEFAULT_W_COMPACT,
    DEFAULT_W_PRIORITY,
    DEFAULT_WORKING_DAYS,
    DEFAULT_PREFERRED_TIMES,
    DEFAULT_MIN_GAP_MINUTES,
    DEFAULT_MAX_GAP_MINUTES,
    DEFAULT_GAP_IMPORTANCE,
    WEIGHT_SUM_TOLERANCE,
)
from ..scheduling.core.weight_config import PreferredTimes, WeightConfig

logger = logging.getLogger(__name__)


def _default_row(user_id: int) -> SlotWeight:
    return SlotWeight(
        user_id=user_id,
        w_time=DEFAULT_W_TIME,
        w_compact=DEFAULT_W_COMPACT,
        w_priority=DEFAULT_W_PRIORITY,
        working_days=list(DEFAULT_WORKING_DAYS),
        preferred_times=copy.deepcopy(DEFAULT_PREFERRED_TIMES),
        min_gap_minutes=DEFAULT_MIN_GAP_MINUTES,
        max_gap_minutes=DEFAULT_MAX_GAP_MINUTES,
        gap_importance=DEFAULT_GAP_IMPORTANCE,
    )


def get_weights(db: Session, user_id: int) -> Optional[SlotWeight]:
    return db.query(SlotWeight).filter(SlotWeight.user_id == user_id).first()


def get_or_create_weights(db: Session, user_id: int) -> SlotWeight:
    """
    Return the teacher's weights, creating the default row on first access.
    Idempotent: concurrent first calls end up reading the same row.
    """
    weights = get_weights(db, user_id)
    if weights:
        return weights

    logger.info(f"⚠️ No slot weights for user {user_id}, creating defaults")
    weights = _default_row(user_id)
    db.add(weights)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the row first
        db.rollback()
        weights = get_weights(db, user_id)
        if weights is None:
            raise
        return weights

    db.refresh(weights)
    return weights


def load_weight_config(db: Session, user_id: int) -> WeightConfig:
    return WeightConfig.from_row(get_or_create_weights(db, user_id))


def list_all_weights(db: Session) -> List[SlotWeight]:
    return db.query(SlotWeight).order_by(SlotWeight.user_id.asc()).all()


def update_weights(db: Session, user_id: int, data: SlotWeightUpdate) -> SlotWeight:
    """
    Apply a partial settings update. Fields left out keep their stored value.
    Nothing is written, not even the default row, unless the update is valid.
    """
    existing = get_weights(db, user_id)
    current = WeightConfig.from_row(existing) if existing else WeightConfig()
    updates = data.model_dump(exclude_unset=True, exclude_none=True)

    min_gap = updates.get("min_gap_minutes", current.min_gap_minutes)
    max_gap = updates.get("max_gap_minutes", current.max_gap_minutes)
    if min_gap > max_gap:
        raise BadRequestError("minGapMinutes cannot be greater than maxGapMinutes")

    proposed = WeightConfig(
        w_time=updates.get("w_time", current.w_time),
        w_compact=updates.get("w_compact", current.w_compact),
        w_priority=updates.get("w_priority", current.w_priority),
    )
    if abs(proposed.weight_sum - 1.0) > WEIGHT_SUM_TOLERANCE:
        # Lenient: the aggregator never normalizes, so just flag it
        logger.warning(f"⚠️ Slot weights for user {user_id} sum to {proposed.weight_sum:.2f}, far from 1.0")

    weights = existing or get_or_create_weights(db, user_id)

    if "preferred_times" in updates:
        # Merge over the stored periods so a partial update keeps the others
        merged = PreferredTimes.from_dict(weights.preferred_times).to_dict()
        for period, value in updates.pop("preferred_times").items():
            merged[period].update(value)
        weights.preferred_times = merged

    for key, value in updates.items():
        setattr(weights, key, value)

    db.commit()
    db.refresh(weights)
    logger.info(f"✅ Slot weights updated for user {user_id}")
    return weights


def delete_weights(db: Session, user_id: int) -> bool:
    """Drop the stored row; the next read recreates defaults."""
    weights = get_weights(db, user_id)
    if not weights:
        return False
    db.delete(weights)
    db.commit()
    logger.info(f"🗑️ Slot weights deleted for user {user_id}")
    return True


def weights_to_dict(weights: SlotWeight) -> dict:
    """Serialize a stored row with the typed defaults filled in."""
    config = WeightConfig.from_row(weights)
    result = config.to_dict()
    result["userId"] = weights.user_id
    result["updatedAt"] = weights.updated_at.isoformat() if weights.updated_at else None
    return result
