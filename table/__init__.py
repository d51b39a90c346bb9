"""Local table host: runs hands of the holdem engine for one human and AI seats."""

from .config import TableConfig
from .server import SpectatorServer
from .session import HUMAN_ID, TableError, TableSession

__all__ = ["HUMAN_ID", "SpectatorServer", "TableConfig", "TableError", "TableSession"]
