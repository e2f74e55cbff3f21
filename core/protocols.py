"""Shared protocol definitions."""

from typing import Protocol


class RelayObserver(Protocol):
    """Protocol for relay phase notifications (Dashboard, console log)."""

    def target_resolved(self, method: str, raw: str, target: str) -> None: ...
    def request_issued(self, method: str, target: str, headers: list[tuple[str, str]]) -> None: ...
    def response_relayed(
        self,
        method: str,
        target: str,
        status: int,
        size: int,
        *,
        elapsed: float = 0.0,
    ) -> None: ...
    def relay_failed(self, method: str, target: str, status: int, message: str) -> None: ...


class NullObserver:
    """Observer that ignores every notification."""

    def target_resolved(self, method: str, raw: str, target: str) -> None:
        pass

    def request_issued(self, method: str, target: str, headers: list[tuple[str, str]]) -> None:
        pass

    def response_relayed(
        self,
        method: str,
        target: str,
        status: int,
        size: int,
        *,
        elapsed: float = 0.0,
    ) -> None:
        pass

    def relay_failed(self, method: str, target: str, status: int, message: str) -> None:
        pass
