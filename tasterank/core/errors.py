"""랭킹 엔진 예외"""


class RankingError(Exception):
    """랭킹 엔진 기본 예외"""

    pass


class SessionStateError(RankingError):
    """삽입 세션 상태와 맞지 않는 호출 (호출자 오류)"""

    def __init__(self, message: str, state=None):
        super().__init__(message)
        self.state = state
