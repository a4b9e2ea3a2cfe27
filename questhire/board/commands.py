"""
Optimistic status move as a command object
"""
from dataclasses import dataclass

from questhire.models.application import ApplicationStatus
from .state import BoardState, MoveFailure, MoveStart, MoveSuccess, reduce


@dataclass(frozen=True)
class OptimisticMove:
    """
    A speculative card move and how to settle it.

    `before` is the board as it was when the move began. `apply()` gives the
    speculative board; `confirm()` and `rollback()` settle the move against
    whatever the board has become in the meantime.
    """
    application_id: str
    from_status: ApplicationStatus
    to_status: ApplicationStatus
    before: BoardState

    def apply(self) -> BoardState:
        return reduce(self.before, MoveStart(self.application_id, self.from_status, self.to_status))

    def confirm(self, current: BoardState) -> BoardState:
        return reduce(current, MoveSuccess(self.application_id))

    def rollback(self, current: BoardState) -> BoardState:
        """Restore the pre-move columns; selection and other in-flight markers are kept"""
        return reduce(current, MoveFailure(self.application_id, self.before.columns))
