from collections.abc import Callable

from doctranslator.logging.logger import Log
from doctranslator.session.base import BaseStorage
from doctranslator.session.models import (
    LAST_EMAIL_KEY,
    REMEMBER_ME_KEY,
    SESSION_KEYS,
    TOKEN_KEY,
    USER_ID_KEY,
    Session,
)

SessionListener = Callable[[Session | None], None]


class SessionStore:
    """Single source of truth for "is a user logged in".

    Every save/clear notifies subscribers. Changes made to the durable
    storage by someone else are picked up by ``sync()``, which notifies in
    the same way, so external sign-outs reach the auth controller as
    ordinary events.
    """

    def __init__(self, storage: BaseStorage) -> None:
        self._storage = storage
        self._listeners: list[SessionListener] = []
        self._last_token = self._storage.get(TOKEN_KEY) or None

    def load(self) -> Session | None:
        """Read the persisted session. Returns None when no token is stored."""
        token = self._storage.get(TOKEN_KEY)
        if not token:
            return None
        remember_me = self._storage.get(REMEMBER_ME_KEY) == "true"
        return Session(
            token=token,
            user_id=self._storage.get(USER_ID_KEY) or "",
            remember_me=remember_me,
            last_email=self._storage.get(LAST_EMAIL_KEY) if remember_me else None,
        )

    def token(self) -> str | None:
        return self._storage.get(TOKEN_KEY) or None

    def remembered_email(self) -> str | None:
        """Email to pre-fill the sign-in form with, if remember-me was set."""
        if self._storage.get(REMEMBER_ME_KEY) != "true":
            return None
        return self._storage.get(LAST_EMAIL_KEY) or None

    def save(self, session: Session) -> None:
        """Persist token and user id; remembered email only with remember-me."""
        self._storage.set(TOKEN_KEY, session.token)
        self._storage.set(USER_ID_KEY, session.user_id)
        if session.remember_me:
            self._storage.set(REMEMBER_ME_KEY, "true")
            if session.last_email:
                self._storage.set(LAST_EMAIL_KEY, session.last_email)
            else:
                self._storage.remove(LAST_EMAIL_KEY)
        else:
            self._storage.remove_many((REMEMBER_ME_KEY, LAST_EMAIL_KEY))
        self._last_token = session.token
        Log.info(f"Session saved for user {session.user_id or '<unknown>'}")
        self._notify(self.load())

    def clear(self) -> None:
        """Remove every session key. Safe to call when nothing is stored."""
        self._storage.remove_many(SESSION_KEYS)
        self._last_token = None
        Log.info("Session cleared")
        self._notify(None)

    def sync(self) -> bool:
        """Re-read durable storage and notify if the token changed externally.

        Returns:
            True if an external change was detected.
        """
        current = self._storage.get(TOKEN_KEY) or None
        if current == self._last_token:
            return False
        self._last_token = current
        Log.info(
            "Session token changed externally"
            if current
            else "Session token removed externally"
        )
        self._notify(self.load())
        return True

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, session: Session | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception as exc:
                Log.error(f"Session listener failed: {exc}")
