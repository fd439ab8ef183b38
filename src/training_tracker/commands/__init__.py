"""CLI commands for training-tracker."""

from .export import export
from .import_data import import_data
from .init import init
from .levels import levels
from .logs import logs
from .moves import moves
from .programs import programs
from .settings import settings

__all__ = [
    "export",
    "import_data",
    "init",
    "levels",
    "logs",
    "moves",
    "programs",
    "settings",
]
