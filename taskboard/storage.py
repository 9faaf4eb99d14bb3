import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .database import get_session, session_factory
from .errors import StorageError
from .models import StoreEntry

logger = logging.getLogger(__name__)


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Could not serialize value for key={key}") from exc


def _decode(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise StorageError(f"Malformed JSON under key={key}") from exc


class KeyValueStore:
    """Persistent JSON key-value store backed by the ``store_entries`` table.

    Every public operation is fail-soft: serialization and database faults
    are logged as warnings and the call behaves as if it had no effect
    (``get`` returns ``None``). Nothing is raised to callers.
    """

    def __init__(self, engine: Engine) -> None:
        self._sessions = session_factory(engine)

    # ---- low-level helpers ----

    def _read(self, key: str) -> Optional[str]:
        try:
            with get_session(self._sessions) as session:
                entry = session.get(StoreEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not read key={key}") from exc

    def _write(self, key: str, payload: str) -> None:
        try:
            with get_session(self._sessions) as session:
                session.merge(StoreEntry(key=key, value=payload, updated_at=datetime.now(timezone.utc)))
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not save key={key}") from exc

    def _delete(self, key: Optional[str] = None) -> None:
        stmt = delete(StoreEntry)
        if key is not None:
            stmt = stmt.where(StoreEntry.key == key)
        try:
            with get_session(self._sessions) as session:
                session.execute(stmt)
                session.commit()
        except SQLAlchemyError as exc:
            target = f"key={key}" if key is not None else "all keys"
            raise StorageError(f"Could not remove {target}") from exc

    # ---- public API ----

    def put(self, key: str, value: Any) -> None:
        try:
            self._write(key, _encode(key, value))
        except StorageError as exc:
            logger.warning("%s; value not saved", exc.message, exc_info=exc.__cause__)

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self._read(key)
            if not raw:
                return None
            return _decode(key, raw)
        except StorageError as exc:
            logger.warning("%s; treating it as absent", exc.message, exc_info=exc.__cause__)
            return None

    def remove(self, key: str) -> None:
        try:
            self._delete(key)
        except StorageError as exc:
            logger.warning("%s", exc.message, exc_info=exc.__cause__)

    def clear(self) -> None:
        try:
            self._delete()
        except StorageError as exc:
            logger.warning("%s", exc.message, exc_info=exc.__cause__)
