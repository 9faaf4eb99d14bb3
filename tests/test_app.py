# tests/test_app.py

from __future__ import annotations

from pathlib import Path

from taskboard import create_app
from taskboard.services import view


def test_state_survives_a_restart(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'taskboard.db'}"

    first = create_app(url, bcrypt_rounds=4, configure_logging=False)
    assert not first.identity.is_loading
    assert first.identity.register("carol", "hunter22").success
    assert first.identity.login("carol", "hunter22").success
    created = first.tasks.create_task({"title": "Buy milk"}).data

    second = create_app(url, bcrypt_rounds=4, configure_logging=False)

    assert second.identity.current_user.username == "carol"
    assert second.tasks.get_task_by_id(created.id) == created
    assert view(second.tasks.tasks, "milk").stats.total == 1


def test_logout_then_restart_starts_signed_out(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'taskboard.db'}"

    first = create_app(url, bcrypt_rounds=4, configure_logging=False)
    first.identity.register("carol", "hunter22")
    first.identity.login("carol", "hunter22")
    first.identity.logout()

    second = create_app(url, bcrypt_rounds=4, configure_logging=False)

    assert second.identity.current_user is None
    assert second.tasks.tasks == ()
