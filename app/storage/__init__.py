from app.storage.base import Storage
from app.storage.memory import MemoryStorage
from app.storage.sql import SqlStorage

__all__ = ["Storage", "MemoryStorage", "SqlStorage"]
