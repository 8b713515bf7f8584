"""
Grievance Portal — Dashboard Store
===================================

What:  The owner dashboard's state as immutable snapshots plus a reducer.
How:   `DashboardState` is a frozen dataclass. Every change is a named action
       (also frozen) passed to `reduce(state, action)`, which returns a new
       snapshot and never mutates the old one. `DashboardStore` holds the
       current snapshot and applies dispatched actions.

State Machine:
    loading ──Fetched──▶ ready
    ready ──OpenCreate──▶ create modal ──CreatingStarted──▶ busy
          ──PersonCreated──▶ ready (+person)      ──CreatingFinished──▶ modal still open
    ready ──OpenDelete(slug)──▶ delete modal ──PersonDeleted──▶ ready (−person)
    ready ──OpenResolve(id, slug)──▶ resolve modal ──MessageResolved──▶ ready (message done)
    any modal ──Close*──▶ ready

    Failures dispatch only the matching *Finished action: the busy flag
    clears and the modal and person list stay as they were.

Messages are split at read time: `active_messages` (done=false) and
`resolved_messages` (done=true). The resolved section of each person is
collapsed until toggled; the toggle state is keyed by slug.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class MessageView:
    id: str
    content: str
    emoji: str
    done: bool
    created_at: datetime
    expected_response: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "MessageView":
        return cls(
            id=str(data["id"]),
            content=data["content"],
            emoji=data["emoji"],
            done=bool(data.get("done", False)),
            created_at=datetime.fromisoformat(data["createdAt"].replace("Z", "+00:00")),
            expected_response=data.get("expectedResponse"),
        )


@dataclass(frozen=True)
class PersonView:
    name: str
    slug: str
    messages: Tuple[MessageView, ...] = ()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PersonView":
        return cls(
            name=data["name"],
            slug=data["slug"],
            messages=tuple(MessageView.from_api(m) for m in data.get("messages", [])),
        )


@dataclass(frozen=True)
class ResolveTarget:
    message_id: str
    person_slug: str


@dataclass(frozen=True)
class DashboardState:
    persons: Tuple[PersonView, ...] = ()
    loading: bool = True
    create_modal_open: bool = False
    delete_target: Optional[str] = None
    resolve_target: Optional[ResolveTarget] = None
    creating: bool = False
    deleting: bool = False
    resolving: bool = False
    expanded_resolved: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))
    copied_link_slug: Optional[str] = None

    def person(self, slug: str) -> Optional[PersonView]:
        for person in self.persons:
            if person.slug == slug:
                return person
        return None

    def is_resolved_expanded(self, slug: str) -> bool:
        return self.expanded_resolved.get(slug, False)


def active_messages(person: PersonView) -> Tuple[MessageView, ...]:
    return tuple(m for m in person.messages if not m.done)


def resolved_messages(person: PersonView) -> Tuple[MessageView, ...]:
    return tuple(m for m in person.messages if m.done)


# ── Actions ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Fetched:
    persons: Tuple[PersonView, ...]


@dataclass(frozen=True)
class OpenCreate:
    pass


@dataclass(frozen=True)
class CloseCreate:
    pass


@dataclass(frozen=True)
class CreatingStarted:
    pass


@dataclass(frozen=True)
class CreatingFinished:
    pass


@dataclass(frozen=True)
class PersonCreated:
    person: PersonView


@dataclass(frozen=True)
class OpenDelete:
    slug: str


@dataclass(frozen=True)
class CloseDelete:
    pass


@dataclass(frozen=True)
class DeletingStarted:
    pass


@dataclass(frozen=True)
class DeletingFinished:
    pass


@dataclass(frozen=True)
class PersonDeleted:
    slug: str


@dataclass(frozen=True)
class OpenResolve:
    message_id: str
    person_slug: str


@dataclass(frozen=True)
class CloseResolve:
    pass


@dataclass(frozen=True)
class ResolvingStarted:
    pass


@dataclass(frozen=True)
class ResolvingFinished:
    pass


@dataclass(frozen=True)
class MessageResolved:
    message_id: str
    person_slug: str


@dataclass(frozen=True)
class ToggleResolvedSection:
    slug: str


@dataclass(frozen=True)
class LinkCopied:
    slug: str


@dataclass(frozen=True)
class CopiedCleared:
    slug: str


Action = Union[
    Fetched,
    OpenCreate, CloseCreate, CreatingStarted, CreatingFinished, PersonCreated,
    OpenDelete, CloseDelete, DeletingStarted, DeletingFinished, PersonDeleted,
    OpenResolve, CloseResolve, ResolvingStarted, ResolvingFinished, MessageResolved,
    ToggleResolvedSection, LinkCopied, CopiedCleared,
]


def _mark_done(person: PersonView, message_id: str) -> PersonView:
    return replace(
        person,
        messages=tuple(
            replace(m, done=True) if m.id == message_id else m
            for m in person.messages
        ),
    )


def reduce(state: DashboardState, action: Action) -> DashboardState:
    """Return the snapshot that results from applying `action` to `state`."""
    if isinstance(action, Fetched):
        return replace(state, persons=tuple(action.persons), loading=False)

    # Create
    if isinstance(action, OpenCreate):
        return replace(state, create_modal_open=True)
    if isinstance(action, CloseCreate):
        return replace(state, create_modal_open=False)
    if isinstance(action, CreatingStarted):
        return replace(state, creating=True)
    if isinstance(action, CreatingFinished):
        return replace(state, creating=False)
    if isinstance(action, PersonCreated):
        return replace(
            state,
            persons=state.persons + (action.person,),
            create_modal_open=False,
            creating=False,
        )

    # Delete
    if isinstance(action, OpenDelete):
        return replace(state, delete_target=action.slug)
    if isinstance(action, CloseDelete):
        return replace(state, delete_target=None)
    if isinstance(action, DeletingStarted):
        return replace(state, deleting=True)
    if isinstance(action, DeletingFinished):
        return replace(state, deleting=False)
    if isinstance(action, PersonDeleted):
        expanded = {k: v for k, v in state.expanded_resolved.items() if k != action.slug}
        return replace(
            state,
            persons=tuple(p for p in state.persons if p.slug != action.slug),
            delete_target=None,
            deleting=False,
            expanded_resolved=MappingProxyType(expanded),
        )

    # Resolve
    if isinstance(action, OpenResolve):
        return replace(state, resolve_target=ResolveTarget(action.message_id, action.person_slug))
    if isinstance(action, CloseResolve):
        return replace(state, resolve_target=None)
    if isinstance(action, ResolvingStarted):
        return replace(state, resolving=True)
    if isinstance(action, ResolvingFinished):
        return replace(state, resolving=False)
    if isinstance(action, MessageResolved):
        return replace(
            state,
            persons=tuple(
                _mark_done(p, action.message_id) if p.slug == action.person_slug else p
                for p in state.persons
            ),
            resolve_target=None,
            resolving=False,
        )

    # Presentation
    if isinstance(action, ToggleResolvedSection):
        expanded = dict(state.expanded_resolved)
        expanded[action.slug] = not expanded.get(action.slug, False)
        return replace(state, expanded_resolved=MappingProxyType(expanded))
    if isinstance(action, LinkCopied):
        return replace(state, copied_link_slug=action.slug)
    if isinstance(action, CopiedCleared):
        # A later copy of another link keeps its own indicator
        if state.copied_link_slug != action.slug:
            return state
        return replace(state, copied_link_slug=None)

    raise TypeError(f"Unknown dashboard action: {action!r}")


class DashboardStore:
    """Holds the current snapshot; the only place state is replaced."""

    def __init__(self, initial: Optional[DashboardState] = None):
        self._state = initial or DashboardState()

    @property
    def state(self) -> DashboardState:
        return self._state

    def dispatch(self, action: Action) -> DashboardState:
        self._state = reduce(self._state, action)
        return self._state
