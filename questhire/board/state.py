"""
Pipeline board state

Immutable snapshots of the board and a pure reducer over board actions. No
I/O happens here; the controller in `board.py` feeds actions in and keeps the
latest state.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

from questhire.models.application import ApplicationStatus, STATUS_LABELS, STATUS_ORDER


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class Card:
    """One application as shown on the board"""
    id: str
    candidate_name: str
    status: ApplicationStatus
    candidate_email: Optional[str] = None
    candidate_phone: Optional[str] = None
    candidate_location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tags: Tuple[str, ...] = ()
    notes_preview: Optional[str] = None
    cv_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        return cls(
            id=data["id"],
            candidate_name=data.get("candidate_name") or "",
            status=ApplicationStatus(data["status"]),
            candidate_email=data.get("candidate_email"),
            candidate_phone=data.get("candidate_phone"),
            candidate_location=data.get("candidate_location"),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
            tags=tuple(data.get("tags") or ()),
            notes_preview=data.get("notes_preview"),
            cv_url=data.get("cv_url"),
        )

    def with_status(self, status: ApplicationStatus) -> "Card":
        return replace(self, status=status)


@dataclass(frozen=True)
class Column:
    """Cards sharing one status, in display order"""
    status: ApplicationStatus
    label: str
    cards: Tuple[Card, ...] = ()

    @property
    def count(self) -> int:
        return len(self.cards)

    def find(self, application_id: str) -> Optional[Card]:
        for card in self.cards:
            if card.id == application_id:
                return card
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        status = ApplicationStatus(data["status"])
        return cls(
            status=status,
            label=data.get("label") or STATUS_LABELS[status],
            cards=tuple(Card.from_dict(a) for a in data.get("applications") or ()),
        )


def normalize_columns(columns) -> Tuple[Column, ...]:
    """Every status exactly once, in display order; missing ones come back empty"""
    by_status = {c.status: c for c in columns}
    return tuple(
        by_status.get(s) or Column(status=s, label=STATUS_LABELS[s])
        for s in STATUS_ORDER
    )


@dataclass(frozen=True)
class JobSummary:
    id: str
    title: str
    location: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class PipelineSnapshot:
    """What the pipeline endpoint returned"""
    job: JobSummary
    columns: Tuple[Column, ...]
    total_applications: int
    can_edit: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineSnapshot":
        job = data.get("job") or {}
        columns = normalize_columns(Column.from_dict(c) for c in data.get("columns") or ())
        return cls(
            job=JobSummary(
                id=job.get("id", ""),
                title=job.get("title", ""),
                location=job.get("location"),
                status=job.get("status"),
            ),
            columns=columns,
            total_applications=data.get("total_applications", sum(c.count for c in columns)),
            can_edit=bool(data.get("can_edit", False)),
        )


@dataclass(frozen=True)
class BoardState:
    job_id: str = ""
    job_title: str = ""
    columns: Tuple[Column, ...] = ()
    loaded: bool = False
    load_error: Optional[str] = None
    can_edit: bool = False
    # applications with a status request in flight
    updating: FrozenSet[str] = frozenset()
    selection_mode: bool = False
    selected: FrozenSet[str] = frozenset()

    def column(self, status: ApplicationStatus) -> Optional[Column]:
        for column in self.columns:
            if column.status == status:
                return column
        return None

    def locate(self, application_id: str) -> Optional[Column]:
        """Column currently holding the application"""
        for column in self.columns:
            if column.find(application_id) is not None:
                return column
        return None

    def is_updating(self, application_id: str) -> bool:
        return application_id in self.updating

    @property
    def total(self) -> int:
        return sum(c.count for c in self.columns)


# ==================== Actions ====================

@dataclass(frozen=True)
class Loaded:
    snapshot: PipelineSnapshot


@dataclass(frozen=True)
class LoadFailed:
    message: str


@dataclass(frozen=True)
class MoveStart:
    application_id: str
    from_status: ApplicationStatus
    to_status: ApplicationStatus


@dataclass(frozen=True)
class MoveSuccess:
    application_id: str


@dataclass(frozen=True)
class MoveFailure:
    application_id: str
    previous_columns: Tuple[Column, ...] = ()


@dataclass(frozen=True)
class SelectionModeChanged:
    enabled: bool


@dataclass(frozen=True)
class SelectionToggled:
    application_id: str


@dataclass(frozen=True)
class SelectionCleared:
    pass


Action = Union[
    Loaded, LoadFailed, MoveStart, MoveSuccess, MoveFailure,
    SelectionModeChanged, SelectionToggled, SelectionCleared,
]


def move_card(
    columns: Tuple[Column, ...],
    application_id: str,
    from_status: ApplicationStatus,
    to_status: ApplicationStatus
) -> Tuple[Column, ...]:
    """
    Remove the card from its source column and prepend it to the destination.

    Columns are returned unchanged when the card is not in `from_status`.
    """
    source = next((c for c in columns if c.status == from_status), None)
    card = source.find(application_id) if source else None
    if card is None:
        return columns

    moved = card.with_status(to_status)
    result = []
    for column in columns:
        if column.status == from_status:
            column = replace(column, cards=tuple(c for c in column.cards if c.id != application_id))
        elif column.status == to_status:
            column = replace(column, cards=(moved,) + column.cards)
        result.append(column)
    return tuple(result)


def reduce(state: BoardState, action: Action) -> BoardState:
    """Next board state; `state` is never modified"""
    if isinstance(action, Loaded):
        snapshot = action.snapshot
        return replace(
            state,
            job_id=snapshot.job.id or state.job_id,
            job_title=snapshot.job.title,
            columns=snapshot.columns,
            loaded=True,
            load_error=None,
            can_edit=snapshot.can_edit,
            updating=frozenset(),
        )

    if isinstance(action, LoadFailed):
        return replace(state, columns=(), loaded=False, load_error=action.message)

    if isinstance(action, MoveStart):
        if action.from_status == action.to_status:
            return state
        return replace(
            state,
            columns=move_card(state.columns, action.application_id, action.from_status, action.to_status),
            updating=state.updating | {action.application_id},
        )

    if isinstance(action, MoveSuccess):
        return replace(state, updating=state.updating - {action.application_id})

    if isinstance(action, MoveFailure):
        return replace(
            state,
            columns=action.previous_columns,
            updating=state.updating - {action.application_id},
        )

    if isinstance(action, SelectionModeChanged):
        if action.enabled:
            return replace(state, selection_mode=True)
        return replace(state, selection_mode=False, selected=frozenset())

    if isinstance(action, SelectionToggled):
        if not state.selection_mode:
            return state
        if action.application_id in state.selected:
            return replace(state, selected=state.selected - {action.application_id})
        return replace(state, selected=state.selected | {action.application_id})

    if isinstance(action, SelectionCleared):
        return replace(state, selection_mode=False, selected=frozenset())

    raise TypeError(f"Unknown board action: {action!r}")
