from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


class StoreEntry(SQLModel, table=True):
    """One key of the local key-value store, value kept as JSON text."""
    __tablename__ = "store_entries"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
