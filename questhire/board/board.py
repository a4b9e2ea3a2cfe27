"""
Pipeline board controller

Holds the current `BoardState`, drives the API client and turns every failure
into board state or a notification. Cards are moved optimistically: the board
changes first, the request follows, and a rejected request restores the
columns from before the move.
"""
from enum import Enum
from typing import Any, Dict, Optional

from loguru import logger

from questhire.models.application import ApplicationStatus, can_transition
from .client import PipelineClient
from .commands import OptimisticMove
from .exceptions import LoadError, MoveError, ShortlistError
from .notifications import Notifier, ToastNotifier
from .state import (
    Action,
    BoardState,
    Loaded,
    LoadFailed,
    SelectionCleared,
    SelectionModeChanged,
    SelectionToggled,
    reduce,
)

MOVE_FAILED_MESSAGE = "Could not update the status. Please try again."


class MoveResult(str, Enum):
    NOOP = "noop"                # same column, nothing to do
    IGNORED = "ignored"          # read-only board, busy card, unknown card or refused transition
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class PipelineBoard:
    """
    Kanban board for one job

    `can_edit` overrides the permission reported by the pipeline endpoint.
    """

    def __init__(
        self,
        client: PipelineClient,
        job_id: str,
        *,
        notifier: Optional[Notifier] = None,
        can_edit: Optional[bool] = None,
        strict_transitions: bool = False,
    ):
        self.client = client
        self.notifier = notifier or ToastNotifier()
        self.strict_transitions = strict_transitions
        self._can_edit = can_edit
        self._state = BoardState(job_id=job_id)

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def job_id(self) -> str:
        return self._state.job_id

    @property
    def can_edit(self) -> bool:
        if self._can_edit is not None:
            return self._can_edit
        return self._state.can_edit

    def dispatch(self, action: Action) -> BoardState:
        self._state = reduce(self._state, action)
        return self._state

    async def load(self) -> bool:
        """Fetch the pipeline; on failure the whole board shows an error and no columns"""
        try:
            snapshot = await self.client.load_pipeline(self.job_id)
        except LoadError as exc:
            logger.warning(f"Pipeline load failed for job {self.job_id}: {exc.message}")
            self.dispatch(LoadFailed(exc.message))
            return False

        self.dispatch(Loaded(snapshot))
        return True

    async def move_application(
        self,
        application_id: str,
        from_status: ApplicationStatus,
        to_status: ApplicationStatus,
        *,
        note: Optional[str] = None
    ) -> MoveResult:
        """
        Move a card to another column, optimistically.

        Raises ValueError for a value that is not an ApplicationStatus.
        """
        source = ApplicationStatus(from_status)
        target = ApplicationStatus(to_status)

        if source == target:
            return MoveResult.NOOP

        state = self._state
        if not self.can_edit:
            return MoveResult.IGNORED
        if state.is_updating(application_id):
            logger.debug(f"Move of {application_id} ignored, a request is already in flight")
            return MoveResult.IGNORED
        column = state.locate(application_id)
        if column is None or column.status != source:
            return MoveResult.IGNORED
        if not can_transition(source, target, strict=self.strict_transitions):
            logger.debug(f"Move of {application_id} ignored, {source.value} → {target.value} not allowed")
            return MoveResult.IGNORED

        move = OptimisticMove(application_id, source, target, before=state)
        self._state = move.apply()

        try:
            await self.client.update_status(application_id, target, note=note)
        except MoveError as exc:
            self._state = move.rollback(self._state)
            logger.warning(
                f"Rolled back move of {application_id} {source.value} → {target.value}: {exc.message}"
            )
            self.notifier.error(MOVE_FAILED_MESSAGE)
            return MoveResult.ROLLED_BACK

        self._state = move.confirm(self._state)
        return MoveResult.COMMITTED

    # ========== Selection / shortlist ==========

    def enter_selection_mode(self) -> bool:
        if not self.can_edit:
            return False
        self.dispatch(SelectionModeChanged(True))
        return True

    def toggle_selection(self, application_id: str) -> bool:
        """Returns whether the application is selected afterwards"""
        self.dispatch(SelectionToggled(application_id))
        return application_id in self._state.selected

    def clear_selection(self) -> None:
        self.dispatch(SelectionCleared())

    async def create_shortlist(
        self,
        name: str,
        *,
        note: Optional[str] = None,
        client_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Send the selected applications to the shortlist service.

        Selection order is not tracked, so items are sent in board order.
        The selection is cleared on success and kept on failure.
        """
        selected = self._state.selected
        if not selected:
            self.notifier.error("Select at least one application")
            return None

        ordered_ids = [
            card.id
            for column in self._state.columns
            for card in column.cards
            if card.id in selected
        ]
        # selected ids no longer on the board go last
        ordered_ids += sorted(selected - set(ordered_ids))

        try:
            shortlist = await self.client.create_shortlist(
                self.job_id, ordered_ids, name=name, note=note, client_id=client_id
            )
        except ShortlistError as exc:
            logger.warning(f"Shortlist creation failed for job {self.job_id}: {exc.message}")
            self.notifier.error(exc.message)
            return None

        self.dispatch(SelectionCleared())
        self.notifier.success(f"Shortlist '{name}' created")
        return shortlist
