"""
Priority-based scoring functions for slot evaluation.
"""

from ..core.constants import VIP_PRIORITY_SCORE, REGULAR_PRIORITY_SCORE


def calculate_priority_score(is_vip: bool) -> float:
    """VIP clients: 1.0, everyone else: 0.5"""
    return VIP_PRIORITY_SCORE if is_vip else REGULAR_PRIORITY_SCORE
