"""
DNI footer phone sync.

WhatConverts swaps the tracked phone number once, when its script first
scans the page. The footer can render after that scan and keep the
original number, so this poller mirrors the swapped PRIMARY anchor onto
the FOOTER anchor:

    <a data-dni-phone="primary" href="tel:...">630-555-0100</a>
    <a data-dni-phone="footer" href="tel:..."><span>Call</span><span>630-555-0100</span></a>

Every `interval` seconds (up to `timeout`) the two hrefs are compared.
Equal hrefs mean either "not swapped yet" or "already in sync"; the two
cannot be told apart, so polling just continues until timeout. The first
mismatch copies the primary number into the footer's trailing element
and stops. Errors stop the poller without surfacing.

Polling runs on the asyncio loop; without one (prerendering) use
sync_once() for a single check of the finished document.
"""

import asyncio
import time
from collections.abc import Callable
from enum import Enum

import structlog
from bs4 import BeautifulSoup, Tag

from lawsite.core.config import Settings, settings as default_settings
from lawsite.core.constants import DNI_FOOTER_SELECTOR, DNI_PRIMARY_SELECTOR

logger = structlog.get_logger()

DocumentSource = BeautifulSoup | Callable[[], BeautifulSoup | None]


class SyncState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    STOPPED = "stopped"


class DniSyncHandle:
    """Caller-owned handle for one polling run."""

    def __init__(self, sync: "DniPhoneSync", done: asyncio.Future):
        self._sync = sync
        self._done = done

    @property
    def state(self) -> SyncState:
        if self._done.done():
            return SyncState.STOPPED
        return self._sync.state

    @property
    def synced(self) -> bool:
        """True once this run has rewritten the footer."""
        return self._done.done() and not self._done.cancelled() and bool(self._done.result())

    def cancel(self) -> None:
        if not self._done.done():
            self._sync.stop()

    async def wait(self) -> bool:
        """Wait for the run to stop; returns whether the footer was synced."""
        return await asyncio.shield(self._done)


class DniPhoneSync:
    """Poll a document until the footer phone matches the primary one."""

    def __init__(
        self,
        document: DocumentSource,
        interval: float = 0.25,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._document = document
        self.interval = interval
        self.timeout = timeout
        self._clock = clock
        self._state = SyncState.IDLE
        self._started_at = 0.0
        self._timer: asyncio.TimerHandle | None = None
        self._done: asyncio.Future | None = None
        self.log = logger.bind(component="DniPhoneSync")

    @classmethod
    def from_settings(
        cls,
        document: DocumentSource,
        config: Settings | None = None,
    ) -> "DniPhoneSync":
        config = config or default_settings
        return cls(document, interval=config.dni_poll_interval, timeout=config.dni_timeout)

    @property
    def state(self) -> SyncState:
        return self._state

    def start(self) -> DniSyncHandle:
        """Begin polling on the running event loop.

        A run already in progress (e.g. from the previous route) is
        stopped first. Polling needs a loop to schedule its timer, so
        outside one this raises RuntimeError; use sync_once() there.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise RuntimeError("DniPhoneSync.start() needs a running event loop") from e

        self.stop()
        self._started_at = self._clock()
        self._state = SyncState.POLLING
        self._done = loop.create_future()
        self._schedule(loop)
        return DniSyncHandle(self, self._done)

    def stop(self, synced: bool = False) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._done is not None and not self._done.done():
            self._done.set_result(synced)
        if self._state == SyncState.POLLING:
            self._state = SyncState.STOPPED

    def tick(self) -> bool:
        """Run one poll step. Returns True while polling should continue."""
        if self._state != SyncState.POLLING:
            return False

        try:
            if self._clock() - self._started_at > self.timeout:
                self.log.debug("DNI sync timed out")
                self.stop()
                return False

            if not self._sync_footer():
                return True

            self.stop(synced=True)
            return False

        except Exception as e:
            self.log.debug("DNI sync aborted", error=str(e))
            self.stop()
            return False

    def sync_once(self) -> bool:
        """Single synchronous check, no event loop needed.

        For prerendering, where the document is final when this runs.
        Returns True when the footer was rewritten. Never raises.
        """
        try:
            return self._sync_footer()
        except Exception as e:
            self.log.debug("DNI sync aborted", error=str(e))
            return False

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _sync_footer(self) -> bool:
        document = self._resolve_document()
        if document is None:
            return False

        primary = document.select_one(DNI_PRIMARY_SELECTOR)
        footer = document.select_one(DNI_FOOTER_SELECTOR)
        if primary is None or footer is None:
            return False

        primary_text = primary.get_text().strip()
        if not primary_text:
            return False

        primary_href = primary.get("href") or ""
        if primary_href == (footer.get("href") or ""):
            return False

        self._mirror(footer, primary_text, primary_href)
        self.log.info("Footer phone synced", href=primary_href)
        return True

    def _resolve_document(self) -> BeautifulSoup | None:
        if isinstance(self._document, BeautifulSoup):
            return self._document
        return self._document()

    def _schedule(self, loop: asyncio.AbstractEventLoop) -> None:
        self._timer = loop.call_later(self.interval, self._on_timer, loop)

    def _on_timer(self, loop: asyncio.AbstractEventLoop) -> None:
        self._timer = None
        if self.tick():
            self._schedule(loop)

    @staticmethod
    def _mirror(footer: Tag, text: str, href: str) -> None:
        # Leading label element stays; only the number element changes
        children = footer.find_all(True, recursive=False)
        target = children[-1] if children else footer
        target.string = text
        footer["href"] = href
