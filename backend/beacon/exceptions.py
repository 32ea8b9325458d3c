"""웹훅 수집/저장 흐름에서 사용하는 도메인 예외입니다."""


class InvalidPayload(Exception):
    """No recognizable message shape, or an empty body."""

    def __init__(self, message: str, received: str = ""):
        super().__init__(message)
        self.message = message
        self.received = received

    def __str__(self) -> str:
        if self.received:
            return f"{self.message} Received: {self.received}"
        return self.message


class StorageError(Exception):
    """Any persistence failure. The originating driver error is kept as __cause__."""
