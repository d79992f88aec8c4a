from .backend import QtWatchBackend
from .controller import WatchController

__all__ = ["QtWatchBackend", "WatchController"]
