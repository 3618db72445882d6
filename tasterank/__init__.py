"""tasterank - 적응형 쌍 비교 랭킹 엔진

사용자의 카테고리별 순위 리스트에 새 아이템을 최소 비교 횟수로 삽입하고,
여러 사용자의 순위를 가중 백분위로 집계합니다.
"""

__version__ = "0.1.0"
