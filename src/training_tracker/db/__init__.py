"""Database layer for training-tracker."""

from .engine import get_data_dir, get_db_path, init_db
from .repositories import Collection, Repository, SettingsStore
from .unit_of_work import Store, UnitOfWork

__all__ = [
    "Collection",
    "get_data_dir",
    "get_db_path",
    "init_db",
    "Repository",
    "SettingsStore",
    "Store",
    "UnitOfWork",
]
