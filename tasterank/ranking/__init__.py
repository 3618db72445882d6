"""Ranking 도메인 - 이진 삽입 계획과 순위 변경

RankingEngine은 tasterank.ranking.engine에서 import
"""

from .mutator import RankMutator, percentile
from .planner import (
    InsertionPlanner,
    InsertionSession,
    binary_search_order,
    max_comparisons,
    seed_search_space,
)

__all__ = [
    "RankMutator",
    "percentile",
    "InsertionPlanner",
    "InsertionSession",
    "binary_search_order",
    "max_comparisons",
    "seed_search_space",
]
