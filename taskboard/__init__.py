"""Local task board: accounts, per-user tasks and filtered task views."""

from .main import TaskboardApp, create_app

__all__ = ["TaskboardApp", "create_app"]
