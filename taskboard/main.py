import logging
from dataclasses import dataclass

from .config import BCRYPT_ROUNDS, LOG_DIR, LOG_LEVEL, STORAGE_URL
from .database import build_engine, create_tables
from .logging_setup import setup_logging
from .services import IdentityManager, TaskRepository
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class TaskboardApp:
    """The services a UI needs, built once per process and passed around."""
    store: KeyValueStore
    identity: IdentityManager
    tasks: TaskRepository


def create_app(
    storage_url: str = STORAGE_URL,
    *,
    bcrypt_rounds: int = BCRYPT_ROUNDS,
    configure_logging: bool = True,
) -> TaskboardApp:
    if configure_logging:
        setup_logging(level=LOG_LEVEL, log_dir=LOG_DIR)

    engine = build_engine(storage_url)
    create_tables(engine)

    store = KeyValueStore(engine)
    identity = IdentityManager(store, bcrypt_rounds=bcrypt_rounds)
    tasks = TaskRepository(store, identity)
    identity.initialize()

    logger.info("Taskboard ready storage=%s", engine.url.render_as_string(hide_password=True))
    return TaskboardApp(store=store, identity=identity, tasks=tasks)
