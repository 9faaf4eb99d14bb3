import logging
import time
from typing import Any, List, Mapping, Optional, Tuple, Union
from uuid import uuid4

from pydantic import ValidationError as SchemaError

from ..errors import AuthError, AuthorizationError, NotFoundError, TaskboardError, ValidationError
from ..schemas.result import Failure, Result, Success
from ..schemas.task import Task, TaskCreate, TaskStatus, TaskUpdate
from ..schemas.user import SessionUser
from ..storage import KeyValueStore
from .auth import USERS_KEY, IdentityManager

logger = logging.getLogger(__name__)


def tasks_key(owner_id: str) -> str:
    return f"tasks_{owner_id}"


def new_task_id(created_at: int) -> str:
    return f"task_{created_at}_{uuid4().hex[:9]}"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _schema_error_message(exc: SchemaError) -> str:
    err = exc.errors()[0]
    if err["type"] == "value_error":
        return str(err["ctx"]["error"])
    field = ".".join(str(part) for part in err["loc"])
    return f"{field}: {err['msg']}" if field else err["msg"]


def _parse(model, data):
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data or {})
    except SchemaError as exc:
        raise ValidationError(_schema_error_message(exc)) from exc


class TaskRepository:
    """In-memory task list of the signed-in user, written through to the store.

    The list is reloaded whenever the session changes. Mutations check that
    a session exists and that it owns the target task; on any failure the list
    and the persisted copy are left untouched.
    """

    def __init__(self, store: KeyValueStore, identity: IdentityManager) -> None:
        self._store = store
        self._identity = identity
        self._tasks: List[Task] = []
        self.is_loading = False
        identity.subscribe(self._on_session_change)
        self.load()

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def _on_session_change(self, user: Optional[SessionUser]) -> None:
        self.load()

    # ---- persistence ----

    def _read_tasks(self, owner_id: str) -> List[Task]:
        records = self._store.get(tasks_key(owner_id)) or []
        if not isinstance(records, list):
            logger.warning("Ignoring malformed task list for owner=%s", owner_id)
            return []

        tasks = []
        for record in records:
            try:
                tasks.append(Task.model_validate(record))
            except SchemaError:
                logger.warning("Skipping malformed task record for owner=%s", owner_id)
        return tasks

    def _commit(self, owner_id: str, tasks: List[Task]) -> None:
        self._store.put(tasks_key(owner_id), [t.model_dump(mode="json", by_alias=True) for t in tasks])
        self._tasks = tasks

    def load(self) -> None:
        self.is_loading = True
        try:
            user = self._identity.current_user
            self._tasks = self._read_tasks(user.id) if user is not None else []
        finally:
            self.is_loading = False
        logger.debug("Loaded %d tasks", len(self._tasks))

    # ---- checks ----

    def _require_user(self) -> SessionUser:
        user = self._identity.current_user
        if user is None:
            raise AuthError("User not authenticated")
        return user

    def _stored_list(self, key: str) -> list:
        records = self._store.get(key)
        return records if isinstance(records, list) else []

    def _stored_owner(self, task_id: str, exclude: str) -> Optional[str]:
        """Owner of a task kept in some other user's list, if there is one."""
        for user_record in self._stored_list(USERS_KEY):
            owner_id = user_record.get("id") if isinstance(user_record, dict) else None
            if not owner_id or owner_id == exclude:
                continue
            for record in self._stored_list(tasks_key(owner_id)):
                if isinstance(record, dict) and record.get("id") == task_id:
                    return record.get("ownerId") or owner_id
        return None

    def _find_owned(self, task_id: str, user: SessionUser) -> int:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                if task.owner_id != user.id:
                    raise AuthorizationError("Not authorized")
                return index
        if self._stored_owner(task_id, exclude=user.id) is not None:
            raise AuthorizationError("Not authorized")
        raise NotFoundError("Task not found")

    def _replace(self, user: SessionUser, index: int, changes: Mapping[str, Any]) -> Task:
        updated = self._tasks[index].model_copy(update=dict(changes))
        tasks = list(self._tasks)
        tasks[index] = updated
        self._commit(user.id, tasks)
        return updated

    # ---- public API ----

    def create_task(self, data: Union[TaskCreate, Mapping[str, Any]]) -> Result:
        try:
            user = self._require_user()
            fields = _parse(TaskCreate, data)
        except TaskboardError as exc:
            return Failure.from_error(exc)

        created_at = _now_ms()
        task = Task(
            id=new_task_id(created_at),
            owner_id=user.id,
            status=TaskStatus.PENDING,
            created_at=created_at,
            **fields.model_dump(),
        )
        self._commit(user.id, [*self._tasks, task])

        logger.info("Created task id=%s owner=%s", task.id, user.id)
        return Success(message="Task created successfully", data=task)

    def update_task(self, task_id: str, patch: Union[TaskUpdate, Mapping[str, Any]]) -> Result:
        try:
            user = self._require_user()
            changes = _parse(TaskUpdate, patch).model_dump(exclude_unset=True, exclude_none=True)
            index = self._find_owned(task_id, user)
        except TaskboardError as exc:
            return Failure.from_error(exc)

        updated = self._replace(user, index, changes)

        logger.info("Updated task id=%s fields=%s", task_id, sorted(changes))
        return Success(message="Task updated successfully", data=updated)

    def delete_task(self, task_id: str) -> Result:
        try:
            user = self._require_user()
            index = self._find_owned(task_id, user)
        except TaskboardError as exc:
            return Failure.from_error(exc)

        self._commit(user.id, self._tasks[:index] + self._tasks[index + 1:])

        logger.info("Deleted task id=%s", task_id)
        return Success(message="Task deleted")

    def toggle_status(self, task_id: str) -> Result:
        """Advance a task to its next status."""
        try:
            user = self._require_user()
            index = self._find_owned(task_id, user)
        except TaskboardError as exc:
            return Failure.from_error(exc)

        updated = self._replace(user, index, {"status": self._tasks[index].status.next()})

        logger.info("Task id=%s moved to %s", task_id, updated.status.value)
        return Success(message="Task updated successfully", data=updated)

    def get_task_by_id(self, task_id: str) -> Optional[Task]:
        """Look up a task of the signed-in user; tasks of anyone else read as missing."""
        user = self._identity.current_user
        if user is None:
            return None
        for task in self._tasks:
            if task.id == task_id:
                return task if task.owner_id == user.id else None
        return None
