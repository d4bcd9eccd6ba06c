"""
Persisted portal session.

The session lives in a small JSON document with the keys ``token``,
``user``, ``rememberMe`` and ``savedEmail``. Without a path it is kept in
memory only.
"""

from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = structlog.get_logger()


class Session(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str | None = None
    user: dict[str, Any] | None = None
    remember_me: bool = Field(False, alias="rememberMe")
    saved_email: str | None = Field(None, alias="savedEmail")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


class SessionStore:
    """Reads and writes the session document; every mutation is persisted."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None
        self._session = self._read()

    def _read(self) -> Session:
        if self.path is None or not self.path.is_file():
            return Session()
        try:
            return Session.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning("unreadable session file ignored", path=str(self.path), error=str(e))
            return Session()

    def _write(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self._session.model_dump_json(by_alias=True), encoding="utf-8")

    def load(self) -> Session:
        """Re-read the persisted document and return it."""
        self._session = self._read()
        return self._session

    @property
    def current(self) -> Session:
        return self._session

    @property
    def token(self) -> str | None:
        return self._session.token

    def save(
        self,
        token: str,
        user: dict[str, Any] | None = None,
        remember_me: bool = False,
        email: str | None = None,
    ) -> Session:
        """Store a fresh login. The email is only remembered when asked to."""
        self._session = Session(
            token=token,
            user=user,
            remember_me=remember_me,
            saved_email=email if remember_me else None,
        )
        self._write()
        return self._session

    def update_user(self, user: dict[str, Any]) -> None:
        self._session = self._session.model_copy(update={"user": user})
        self._write()

    def invalidate(self) -> None:
        """Drop the credentials but keep the remembered email."""
        if self._session.token is None and self._session.user is None:
            return
        self._session = self._session.model_copy(update={"token": None, "user": None})
        self._write()
        logger.info("session invalidated")

    def clear(self) -> None:
        """Forget everything, remembered email included."""
        self._session = Session()
        if self.path is not None:
            self.path.unlink(missing_ok=True)
