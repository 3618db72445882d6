"""Scoring 도메인 - cross-user 종합 점수"""

from .composite import CompositeScorer, RaterContribution, rater_weight

__all__ = [
    "CompositeScorer",
    "RaterContribution",
    "rater_weight",
]
