"""Process-wide auth state as an explicit publish/subscribe channel.

The channel owns the session token and user; UI code subscribes instead of
reading globals. Subscribers receive the current user immediately and then every
change, with ``None`` meaning signed out.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger("trendhaven.client")

Listener = Callable[[Optional[Dict[str, Any]]], None]


class AuthStateChannel:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._token: Optional[str] = None
        self._user: Optional[Dict[str, Any]] = None
        self._listeners: List[Listener] = []

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._user

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)
            user = self._user
        listener(user)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, user: Optional[Dict[str, Any]], token: Optional[str]) -> None:
        with self._lock:
            self._user = user
            self._token = token
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(user)
            except Exception:
                logger.exception("auth listener failed")

    def clear(self) -> None:
        self.publish(None, None)
