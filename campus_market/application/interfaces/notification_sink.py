from abc import ABC, abstractmethod
from enum import Enum


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class NotificationSink(ABC):
    """Port for user-facing feedback; fire-and-forget."""

    @abstractmethod
    def notify(self, kind: NotificationKind, message: str) -> None:
        ...

    def success(self, message: str) -> None:
        self.notify(NotificationKind.SUCCESS, message)

    def error(self, message: str) -> None:
        self.notify(NotificationKind.ERROR, message)
