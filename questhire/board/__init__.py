"""
Client-side pipeline board

Framework-free board state for the pipeline view: an immutable state with a
pure reducer, an optimistic move command, an httpx API client, and the
controller tying them together.
"""
from .board import PipelineBoard, MoveResult, MOVE_FAILED_MESSAGE
from .client import PipelineClient
from .commands import OptimisticMove
from .exceptions import BoardError, LoadError, MoveError, ShortlistError
from .notifications import Notifier, ToastNotifier, Toast
from .state import (
    BoardState,
    Card,
    Column,
    JobSummary,
    PipelineSnapshot,
    Loaded,
    LoadFailed,
    MoveStart,
    MoveSuccess,
    MoveFailure,
    SelectionModeChanged,
    SelectionToggled,
    SelectionCleared,
    move_card,
    reduce,
)

__all__ = [
    "PipelineBoard",
    "MoveResult",
    "MOVE_FAILED_MESSAGE",
    "PipelineClient",
    "OptimisticMove",
    "BoardError",
    "LoadError",
    "MoveError",
    "ShortlistError",
    "Notifier",
    "ToastNotifier",
    "Toast",
    "BoardState",
    "Card",
    "Column",
    "JobSummary",
    "PipelineSnapshot",
    "Loaded",
    "LoadFailed",
    "MoveStart",
    "MoveSuccess",
    "MoveFailure",
    "SelectionModeChanged",
    "SelectionToggled",
    "SelectionCleared",
    "move_card",
    "reduce",
]
