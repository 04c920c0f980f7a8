"""
WhatConverts DNI refresh trigger.

WhatConverts only scans for phone numbers when its script loads. After a
client-side navigation (or a late render) it has to be told to scan
again. Three strategies are tried in order, stopping at the first that
applies:

1. Official SPA API: push a pageview onto the global `_wcq` queue
2. Direct re-scan APIs: `_wci.run()` or `WhatConverts.track()`
3. Fallback: drop our previously re-inserted script copy and append a
   fresh copy of the original script to force re-execution

Refreshes are throttled, and nothing here ever raises: the script may be
blocked by an ad blocker or not loaded at all.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from bs4 import BeautifulSoup, Tag

from lawsite.core.config import Settings, settings as default_settings
from lawsite.core.constants import WC_COPY_ATTR, WC_SCRIPT_PATTERNS

logger = structlog.get_logger()

STRATEGY_QUEUE = "wcq_pageview"
STRATEGY_WCI_RUN = "wci_run"
STRATEGY_TRACK = "whatconverts_track"
STRATEGY_REINSERT = "script_reinsert"

COPY_ATTR_VALUE = "dni"


@dataclass
class PageContext:
    """The page being processed: its document and global namespace."""
    document: BeautifulSoup
    globals: dict[str, Any] = field(default_factory=dict)
    path: str = "/"
    search: str = ""


def _callable_member(obj: Any, name: str) -> Callable[[], Any] | None:
    if obj is None:
        return None
    member = obj.get(name) if isinstance(obj, dict) else getattr(obj, name, None)
    return member if callable(member) else None


class WhatConvertsRefresher:
    """Throttled, delayed DNI re-scan for one page context."""

    def __init__(
        self,
        context: PageContext,
        delay: float = 0.1,
        throttle: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.context = context
        self.delay = delay
        self.throttle = throttle
        self._clock = clock
        self._last_refresh_at: float | None = None
        self.log = logger.bind(component="WhatConvertsRefresher")

    @classmethod
    def from_settings(
        cls,
        context: PageContext,
        config: Settings | None = None,
    ) -> "WhatConvertsRefresher":
        config = config or default_settings
        return cls(context, delay=config.dni_refresh_delay, throttle=config.dni_refresh_throttle)

    def reset_throttle(self) -> None:
        self._last_refresh_at = None

    def refresh(self, reason: str, force: bool = False) -> bool:
        """Schedule a re-scan after `delay` seconds.

        Calls within `throttle` seconds of the last accepted one are
        ignored unless `force` is set. Returns True when scheduled.
        Outside a running event loop the strategies run immediately.
        """
        now = self._clock()
        if (
            not force
            and self._last_refresh_at is not None
            and now - self._last_refresh_at < self.throttle
        ):
            self.log.debug(
                "Refresh throttled",
                reason=reason,
                remaining=round(self.throttle - (now - self._last_refresh_at), 3),
            )
            return False

        # Lock before the delay so rapid calls are rejected
        self._last_refresh_at = now

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.run_strategies(reason)
            return True

        loop.call_later(self.delay, self.run_strategies, reason)
        return True

    def run_strategies(self, reason: str) -> str | None:
        """Apply the first strategy that works; returns its name or None."""
        try:
            return self._run_strategies(reason)
        except Exception as e:
            self.log.debug("Refresh failed", reason=reason, error=str(e))
            return None

    def _run_strategies(self, reason: str) -> str | None:
        page_globals = self.context.globals
        log = self.log.bind(reason=reason)

        queue = page_globals.get("_wcq")
        if isinstance(queue, list):
            queue.append({"event": "pageview", "path": self.context.path + self.context.search})
            log.debug("Pushed pageview to _wcq")
            return STRATEGY_QUEUE

        run = _callable_member(page_globals.get("_wci"), "run")
        if run is not None:
            run()
            log.debug("Called _wci.run()")
            return STRATEGY_WCI_RUN

        track = _callable_member(page_globals.get("WhatConverts"), "track")
        if track is not None:
            track()
            log.debug("Called WhatConverts.track()")
            return STRATEGY_TRACK

        return self._reinsert_script(log)

    def _find_original_script(self) -> Tag | None:
        """The CMS-injected script, never one of our re-inserted copies."""
        document = self.context.document
        for pattern in WC_SCRIPT_PATTERNS:
            script = document.select_one(f'script[src*="{pattern}"]:not([{WC_COPY_ATTR}])')
            if script is not None:
                return script
        return None

    def _reinsert_script(self, log: Any) -> str | None:
        original = self._find_original_script()
        if original is None:
            log.debug("WhatConverts script not found (not loaded or blocked)")
            return None

        src = original.get("src")
        if not src:
            return None

        document = self.context.document
        for copy in document.select(f'script[{WC_COPY_ATTR}="{COPY_ATTR_VALUE}"]'):
            copy.decompose()

        script = document.new_tag("script", src=src)
        script[WC_COPY_ATTR] = COPY_ATTR_VALUE

        head = document.head
        if head is None:
            head = document.new_tag("head")
            root = document.html or document
            root.insert(0, head)
        head.append(script)

        log.debug("Re-inserted WhatConverts script", src=src)
        return STRATEGY_REINSERT
