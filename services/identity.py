"""Local identity service: registration, sign-in and session notifications."""

import sqlite3
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional
import tomllib
import tomli_w
from passlib.context import CryptContext

from errors import AuthenticationError
from logger import get_logger

logger = get_logger()

_MIN_PASSWORD_LENGTH = 6

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass
class AuthSession:
    """A signed-in user."""

    user_id: str
    email: str


SessionListener = Callable[[Optional[AuthSession]], None]


class IdentityService:
    """Service for user accounts and the active session.

    Args:
        db_manager: Database manager instance for database operations.
        session_path: File remembering the signed-in user between runs. When
            None the session only lives in memory.
    """

    def __init__(self, db_manager, session_path: Optional[Path] = None):
        self.db_manager = db_manager
        self.session_path = session_path
        self._listeners: List[SessionListener] = []
        self._session = self._read_session()

    def register(self, email: str, password: str) -> AuthSession:
        """Create an account and sign it in.

        Raises:
            AuthenticationError: If the email is taken or the input is invalid.
        """
        email = email.strip().lower()
        if "@" not in email:
            raise AuthenticationError("Invalid email address")
        if len(password) < _MIN_PASSWORD_LENGTH:
            raise AuthenticationError(
                f"Password must be at least {_MIN_PASSWORD_LENGTH} characters"
            )

        user_id = uuid.uuid4().hex
        try:
            with self.db_manager.connect() as conn:
                conn.execute(
                    """
                    INSERT INTO users (id, email, password_hash)
                    VALUES (?, ?, ?)
                    """,
                    (user_id, email, pwd_context.hash(password)),
                )
                conn.commit()
        except sqlite3.IntegrityError:
            raise AuthenticationError(f"An account for {email} already exists")

        logger.info(f"Registered user {email}")
        return self._start_session(AuthSession(user_id=user_id, email=email))

    def authenticate(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password.

        Raises:
            AuthenticationError: If the credentials don't match an account.
        """
        email = email.strip().lower()
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, password_hash FROM users WHERE email = ?",
                (email,),
            )
            row = cursor.fetchone()

        if row is None:
            # Keeps unknown emails as slow as wrong passwords
            pwd_context.dummy_verify()
        if row is None or not pwd_context.verify(password, row[1]):
            logger.warning(f"Failed sign-in attempt for {email}")
            raise AuthenticationError("Invalid email or password")

        return self._start_session(AuthSession(user_id=row[0], email=email))

    def sign_out(self) -> None:
        if self._session is None:
            return
        logger.info(f"Signed out {self._session.email}")
        self._session = None
        if self.session_path is not None and self.session_path.exists():
            self.session_path.unlink()
        self._notify()

    def current_session(self) -> Optional[AuthSession]:
        return self._session

    def require_session(self) -> AuthSession:
        """Get the active session.

        Raises:
            AuthenticationError: If nobody is signed in.
        """
        if self._session is None:
            raise AuthenticationError("Not signed in")
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a callback for session changes.

        The callback receives the new session, or None after sign-out.

        Returns:
            A function that removes the callback.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _start_session(self, session: AuthSession) -> AuthSession:
        self._session = session
        self._write_session(session)
        logger.info(f"Signed in {session.email}")
        self._notify()
        return session

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)

    def _read_session(self) -> Optional[AuthSession]:
        if self.session_path is None or not self.session_path.exists():
            return None
        with open(self.session_path, "rb") as f:
            data = tomllib.load(f)
        if "user_id" not in data or "email" not in data:
            logger.warning(f"Ignoring malformed session file: {self.session_path}")
            return None
        return AuthSession(user_id=data["user_id"], email=data["email"])

    def _write_session(self, session: AuthSession) -> None:
        if self.session_path is None:
            return
        self.session_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.session_path, "wb") as f:
            tomli_w.dump({"user_id": session.user_id, "email": session.email}, f)
