import logging
import time
from typing import Callable, List, Optional
from uuid import uuid4

import bcrypt
from pydantic import ValidationError as SchemaError

from ..config import BCRYPT_ROUNDS, MIN_PASSWORD_LENGTH
from ..errors import AuthError, ConflictError, TaskboardError, ValidationError
from ..schemas.result import Failure, Result, Success
from ..schemas.user import SessionUser, User
from ..storage import KeyValueStore

logger = logging.getLogger(__name__)

USERS_KEY = "users"
CURRENT_USER_KEY = "currentUser"

SessionListener = Callable[[Optional[SessionUser]], None]


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:72]  # bcrypt only looks at the first 72 bytes


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    hashed_bytes = hashed_password.encode("utf-8") if isinstance(hashed_password, str) else hashed_password
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_bytes)
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def get_password_hash(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt directly."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def new_user_id() -> str:
    return f"user_{int(time.time() * 1000)}_{uuid4().hex[:8]}"


class IdentityManager:
    """Owns the account list and the signed-in session.

    Every public operation that can fail returns a ``Result``; domain errors
    are raised by the private helpers and converted at this boundary.
    """

    def __init__(self, store: KeyValueStore, *, bcrypt_rounds: int = BCRYPT_ROUNDS) -> None:
        self._store = store
        self._rounds = bcrypt_rounds
        self._current_user: Optional[SessionUser] = None
        self._listeners: List[SessionListener] = []
        self._initialized = False
        self.is_loading = True
        self.error: Optional[str] = None

    @property
    def current_user(self) -> Optional[SessionUser]:
        return self._current_user

    def subscribe(self, listener: SessionListener) -> None:
        """Call ``listener`` with the new session every time it changes."""
        self._listeners.append(listener)

    def _set_current_user(self, user: Optional[SessionUser]) -> None:
        self._current_user = user
        for listener in self._listeners:
            listener(user)

    def _fail(self, exc: TaskboardError) -> Failure:
        self.error = exc.message
        logger.info("%s failed: %s", exc.kind.value, exc.message)
        return Failure.from_error(exc)

    def _load_users(self) -> List[User]:
        records = self._store.get(USERS_KEY) or []
        if not isinstance(records, list):
            logger.warning("Ignoring malformed %r record", USERS_KEY)
            return []

        users = []
        for record in records:
            try:
                users.append(User.model_validate(record))
            except SchemaError:
                logger.warning("Skipping malformed user record")
        return users

    def initialize(self) -> None:
        """Restore the persisted session. Later calls do nothing."""
        if self._initialized:
            logger.debug("IdentityManager already initialized")
            return
        self._initialized = True

        user = None
        try:
            record = self._store.get(CURRENT_USER_KEY)
            if record is not None:
                user = SessionUser.model_validate(record)
        except SchemaError:
            logger.warning("Discarding malformed %r record", CURRENT_USER_KEY)
            self.error = "Could not load the session"
        finally:
            self.is_loading = False

        self._set_current_user(user)
        logger.info("Session restored user=%s", user.username if user else None)

    def register(self, username: str, password: str) -> Result:
        """Create an account. Does not sign the new user in."""
        self.error = None
        try:
            if not username or not password:
                raise ValidationError("All fields are required")
            if len(password) < MIN_PASSWORD_LENGTH:
                raise ValidationError(
                    f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
                )

            users = self._load_users()
            if any(u.username == username for u in users):
                raise ConflictError("Username already exists")

            user = User(
                id=new_user_id(),
                username=username,
                hashed_password=get_password_hash(password, self._rounds),
            )
            users.append(user)
            self._store.put(USERS_KEY, [u.model_dump(by_alias=True) for u in users])
        except TaskboardError as exc:
            return self._fail(exc)

        logger.info("Registered user=%s id=%s", user.username, user.id)
        return Success(message="Registration successful. Please sign in")

    def _authenticate(self, username: str, password: str) -> User:
        for user in self._load_users():
            if user.username == username and verify_password(password, user.hashed_password):
                return user
        raise AuthError("Invalid username or password")

    def login(self, username: str, password: str) -> Result:
        self.error = None
        try:
            if not username or not password:
                raise ValidationError("All fields are required")
            user = self._authenticate(username, password)
        except TaskboardError as exc:
            return self._fail(exc)

        session = SessionUser(id=user.id, username=user.username)
        self._store.put(CURRENT_USER_KEY, session.model_dump(by_alias=True))
        self._set_current_user(session)

        logger.info("Signed in user=%s", session.username)
        return Success(message="Signed in successfully", data=session)

    def logout(self) -> None:
        """Sign out. Safe to call when nobody is signed in."""
        self._store.remove(CURRENT_USER_KEY)
        self.error = None
        if self._current_user is None:
            return
        logger.info("Signed out user=%s", self._current_user.username)
        self._set_current_user(None)
