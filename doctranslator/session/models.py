from dataclasses import dataclass

TOKEN_KEY = "authToken"
USER_ID_KEY = "userId"
REMEMBER_ME_KEY = "rememberMe"
LAST_EMAIL_KEY = "lastEmail"

SESSION_KEYS = (TOKEN_KEY, USER_ID_KEY, REMEMBER_ME_KEY, LAST_EMAIL_KEY)


@dataclass(frozen=True)
class Session:
    """Authenticated identity persisted in durable client storage."""

    token: str
    user_id: str = ""
    remember_me: bool = False
    last_email: str | None = None
