"""
Grievance Portal — Dashboard Controller
========================================

What:  Drives the owner dashboard against the HTTP API.
How:   Every state-changing action is a two-step flow: `open_*` records what
       the user picked and opens the confirmation modal; `confirm_*` sends
       the request. On a 2xx response the in-memory list is patched through
       the store (no re-fetch). On any failure the error is logged and the
       state is left as it was, modal included.
Who:   The dashboard UI layer; tests drive it with an httpx transport.

    load()                        GET    /api/person
    confirm_create(name)          POST   /api/person
    confirm_delete()              DELETE /api/person?slug=
    confirm_resolve()             PATCH  /api/message?id=
    copy_link(slug)               share URL + 3 second "copied" indicator
"""

import asyncio
import logging
from typing import Optional

import httpx

from app.config import settings
from app.dashboard.store import (
    CloseCreate,
    CloseDelete,
    CloseResolve,
    CopiedCleared,
    CreatingFinished,
    CreatingStarted,
    DashboardState,
    DashboardStore,
    DeletingFinished,
    DeletingStarted,
    Fetched,
    LinkCopied,
    MessageResolved,
    OpenCreate,
    OpenDelete,
    OpenResolve,
    PersonCreated,
    PersonDeleted,
    PersonView,
    ResolvingFinished,
    ResolvingStarted,
    ToggleResolvedSection,
)

logger = logging.getLogger(__name__)

COPIED_INDICATOR_SECONDS = 3.0


class DashboardController:
    """
    Owner dashboard bound to one API client.

    Args:
        client: httpx.AsyncClient pointed at the API (base_url set), already
                carrying the session cookie or Authorization header.
        store: optional pre-built store (tests seed state through it).
        public_base_url: base for share links; defaults to settings.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        store: Optional[DashboardStore] = None,
        public_base_url: Optional[str] = None,
        copied_indicator_seconds: float = COPIED_INDICATOR_SECONDS,
    ):
        self._client = client
        self.store = store or DashboardStore()
        self._public_base_url = (public_base_url or settings.public_base_url).rstrip("/")
        self._copied_indicator_seconds = copied_indicator_seconds
        self._copied_timer: Optional[asyncio.TimerHandle] = None

    @property
    def state(self) -> DashboardState:
        return self.store.state

    # ── Fetch ─────────────────────────────────────────────────────────────

    async def load(self) -> DashboardState:
        """Fetch the owner's persons once. A failure leaves an empty list."""
        persons: tuple = ()
        try:
            response = await self._client.get("/api/person")
            if response.is_success:
                persons = tuple(
                    PersonView.from_api(p) for p in response.json().get("persons", [])
                )
            else:
                logger.error("Failed to fetch persons: HTTP %d", response.status_code)
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.error("Error fetching persons: %s", exc)
        return self.store.dispatch(Fetched(persons=persons))

    # ── Create ────────────────────────────────────────────────────────────

    def open_create(self) -> None:
        self.store.dispatch(OpenCreate())

    def close_create(self) -> None:
        self.store.dispatch(CloseCreate())

    @staticmethod
    def can_create(name: str) -> bool:
        return bool(name.strip()) and len(name) <= settings.person_name_max_length

    async def confirm_create(self, name: str) -> bool:
        if not self.state.create_modal_open or not self.can_create(name) or self.state.creating:
            return False

        self.store.dispatch(CreatingStarted())
        try:
            response = await self._client.post("/api/person", json={"name": name})
            if response.is_success:
                created = response.json().get("persons", [])
                for person in created:
                    self.store.dispatch(PersonCreated(person=PersonView.from_api(person)))
                return bool(created)
            logger.error("Failed to create person: HTTP %d", response.status_code)
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.error("Error creating person: %s", exc)
        finally:
            self.store.dispatch(CreatingFinished())
        return False

    # ── Delete ────────────────────────────────────────────────────────────

    def open_delete(self, slug: str) -> None:
        self.store.dispatch(OpenDelete(slug=slug))

    def close_delete(self) -> None:
        self.store.dispatch(CloseDelete())

    async def confirm_delete(self) -> bool:
        slug = self.state.delete_target
        if slug is None or self.state.deleting:
            return False

        self.store.dispatch(DeletingStarted())
        try:
            response = await self._client.delete("/api/person", params={"slug": slug})
            if response.is_success:
                self.store.dispatch(PersonDeleted(slug=slug))
                return True
            logger.error("Failed to delete person %s: HTTP %d", slug, response.status_code)
        except httpx.HTTPError as exc:
            logger.error("Error deleting person %s: %s", slug, exc)
        finally:
            self.store.dispatch(DeletingFinished())
        return False

    # ── Resolve ───────────────────────────────────────────────────────────

    def open_resolve(self, message_id: str, person_slug: str) -> None:
        self.store.dispatch(OpenResolve(message_id=message_id, person_slug=person_slug))

    def close_resolve(self) -> None:
        self.store.dispatch(CloseResolve())

    async def confirm_resolve(self) -> bool:
        target = self.state.resolve_target
        if target is None or self.state.resolving:
            return False

        self.store.dispatch(ResolvingStarted())
        try:
            response = await self._client.patch(
                "/api/message", params={"id": target.message_id}
            )
            if response.is_success:
                self.store.dispatch(
                    MessageResolved(message_id=target.message_id, person_slug=target.person_slug)
                )
                return True
            logger.error(
                "Failed to mark message %s as done: HTTP %d",
                target.message_id,
                response.status_code,
            )
        except httpx.HTTPError as exc:
            logger.error("Error marking message %s as done: %s", target.message_id, exc)
        finally:
            self.store.dispatch(ResolvingFinished())
        return False

    # ── Presentation ──────────────────────────────────────────────────────

    def toggle_resolved_section(self, slug: str) -> None:
        self.store.dispatch(ToggleResolvedSection(slug=slug))

    def share_link(self, slug: str) -> str:
        return f"{self._public_base_url}/share/{slug}"

    def copy_link(self, slug: str) -> str:
        """
        Return the share link and raise the "copied" indicator for `slug`.

        Must be called from a running event loop: the indicator is cleared
        by a timer after `copied_indicator_seconds`. A new copy restarts the
        timer, so the indicator always stays up for the full period.
        """
        link = self.share_link(slug)
        if self._copied_timer is not None:
            self._copied_timer.cancel()
        self.store.dispatch(LinkCopied(slug=slug))
        self._copied_timer = asyncio.get_running_loop().call_later(
            self._copied_indicator_seconds,
            self.store.dispatch,
            CopiedCleared(slug=slug),
        )
        return link
