"""
Flash notifications kept in the signed session cookie.

A moderation action stores its outcome here, redirects, and the next page the
user loads pops the messages.
"""
from typing import Any

from campus_market.application.interfaces.notification_sink import (
    NotificationKind,
    NotificationSink,
)

FLASH_SESSION_KEY = "_flashes"


class SessionFlashSink(NotificationSink):
    def __init__(self, session: dict[str, Any]) -> None:
        self._session = session

    def notify(self, kind: NotificationKind, message: str) -> None:
        flashes = list(self._session.get(FLASH_SESSION_KEY, []))
        flashes.append({"kind": kind.value, "message": message})
        self._session[FLASH_SESSION_KEY] = flashes


def pop_flashes(session: dict[str, Any]) -> list[dict[str, str]]:
    return list(session.pop(FLASH_SESSION_KEY, []))
