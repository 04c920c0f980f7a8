"""
Unit tests for the DNI footer phone sync.
"""

import asyncio

import pytest
from bs4 import BeautifulSoup

from lawsite.core.config import Settings
from lawsite.services.dni import DniPhoneSync, SyncState

ORIGINAL = "tel:6304494800"
SWAPPED = "tel:6305550100"


def make_page(primary_href=ORIGINAL, primary_text="(630) 449-4800", footer_href=ORIGINAL):
    return BeautifulSoup(
        f"""
        <html><body>
          <section><a data-dni-phone="primary" href="{primary_href}">{primary_text}</a></section>
          <footer>
            <a data-dni-phone="footer" href="{footer_href}"><span>Call us</span><span>(630) 449-4800</span></a>
          </footer>
        </body></html>
        """,
        "html.parser",
    )


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.mark.asyncio
class TestDniPhoneSyncTick:
    """Single poll steps; the interval is long so only manual ticks run."""

    async def test_matching_hrefs_no_mutation(self, clock):
        page = make_page()
        before = str(page)
        sync = DniPhoneSync(page, interval=60, clock=clock)
        handle = sync.start()

        assert sync.tick() is True
        assert str(page) == before
        assert handle.state == SyncState.POLLING
        handle.cancel()

    async def test_mismatch_updates_footer_and_stops(self, clock):
        page = make_page(primary_href=SWAPPED, primary_text="(630) 555-0100")
        sync = DniPhoneSync(page, interval=60, clock=clock)
        handle = sync.start()

        assert sync.tick() is False

        footer = page.select_one('a[data-dni-phone="footer"]')
        label, number = footer.find_all("span")
        assert footer["href"] == SWAPPED
        assert number.get_text() == "(630) 555-0100"
        assert label.get_text() == "Call us"
        assert handle.state == SyncState.STOPPED
        assert handle.synced is True
        # Stopped pollers ignore further ticks
        assert sync.tick() is False

    async def test_footer_without_children_gets_text(self, clock):
        page = BeautifulSoup(
            f'<a data-dni-phone="primary" href="{SWAPPED}">555-0100</a>'
            f'<a data-dni-phone="footer" href="{ORIGINAL}">449-4800</a>',
            "html.parser",
        )
        sync = DniPhoneSync(page, interval=60, clock=clock)
        sync.start()

        assert sync.tick() is False
        footer = page.select_one('a[data-dni-phone="footer"]')
        assert footer.get_text() == "555-0100"
        assert footer["href"] == SWAPPED

    async def test_missing_anchor_keeps_polling(self, clock):
        page = BeautifulSoup(f'<a data-dni-phone="primary" href="{SWAPPED}">555</a>', "html.parser")
        sync = DniPhoneSync(page, interval=60, clock=clock)
        handle = sync.start()

        assert sync.tick() is True
        handle.cancel()

    async def test_primary_must_be_tel_link(self, clock):
        page = make_page(primary_href="/contact/")
        sync = DniPhoneSync(page, interval=60, clock=clock)
        handle = sync.start()

        assert sync.tick() is True
        assert page.select_one('a[data-dni-phone="footer"]')["href"] == ORIGINAL
        handle.cancel()

    async def test_empty_primary_text_keeps_polling(self, clock):
        page = make_page(primary_href=SWAPPED, primary_text="   ")
        sync = DniPhoneSync(page, interval=60, clock=clock)
        handle = sync.start()

        assert sync.tick() is True
        assert page.select_one('a[data-dni-phone="footer"]')["href"] == ORIGINAL
        handle.cancel()

    async def test_timeout_stops(self, clock):
        page = make_page()
        sync = DniPhoneSync(page, interval=60, timeout=10, clock=clock)
        handle = sync.start()

        clock.now += 10.5
        assert sync.tick() is False
        assert handle.state == SyncState.STOPPED
        assert handle.synced is False

    async def test_document_provider(self, clock):
        pages = [None, make_page(primary_href=SWAPPED)]
        sync = DniPhoneSync(lambda: pages[0], interval=60, clock=clock)
        sync.start()

        assert sync.tick() is True
        pages[0] = pages[1]
        assert sync.tick() is False

    async def test_provider_error_stops_silently(self, clock):
        def broken():
            raise RuntimeError("document gone")

        sync = DniPhoneSync(broken, interval=60, clock=clock)
        handle = sync.start()

        assert sync.tick() is False
        assert handle.state == SyncState.STOPPED

    async def test_tick_before_start_is_noop(self, clock):
        sync = DniPhoneSync(make_page(primary_href=SWAPPED), clock=clock)
        assert sync.state == SyncState.IDLE
        assert sync.tick() is False


@pytest.mark.asyncio
class TestDniPhoneSyncLoop:
    """Timer-driven polling on the event loop."""

    async def test_syncs_once_primary_is_swapped(self):
        page = make_page()
        sync = DniPhoneSync(page, interval=0.01, timeout=5)
        handle = sync.start()

        await asyncio.sleep(0.03)
        assert handle.state == SyncState.POLLING

        primary = page.select_one('a[data-dni-phone="primary"]')
        primary["href"] = SWAPPED
        primary.string = "(630) 555-0100"

        assert await asyncio.wait_for(handle.wait(), timeout=1) is True
        assert page.select_one('a[data-dni-phone="footer"]')["href"] == SWAPPED

    async def test_times_out_without_mutation(self):
        page = make_page()
        before = str(page)
        handle = DniPhoneSync(page, interval=0.01, timeout=0.05).start()

        assert await asyncio.wait_for(handle.wait(), timeout=1) is False
        assert str(page) == before

    async def test_restart_cancels_previous_run(self):
        sync = DniPhoneSync(make_page(), interval=0.01, timeout=5)
        first = sync.start()
        second = sync.start()

        assert first.state == SyncState.STOPPED
        assert second.state == SyncState.POLLING
        second.cancel()
        assert second.state == SyncState.STOPPED
        assert sync.state == SyncState.STOPPED


class TestDniPhoneSyncWithoutLoop:
    def test_start_requires_running_loop(self):
        with pytest.raises(RuntimeError, match="running event loop"):
            DniPhoneSync(make_page()).start()

    def test_sync_once_mirrors_swapped_number(self):
        page = make_page(primary_href=SWAPPED, primary_text="(630) 555-0100")
        assert DniPhoneSync(page).sync_once() is True
        assert page.select_one('a[data-dni-phone="footer"]')["href"] == SWAPPED

    def test_sync_once_matching_hrefs(self):
        page = make_page()
        before = str(page)
        assert DniPhoneSync(page).sync_once() is False
        assert str(page) == before

    def test_sync_once_swallows_errors(self):
        def broken():
            raise RuntimeError("document gone")

        assert DniPhoneSync(broken).sync_once() is False


def test_from_settings_uses_configured_timing():
    config = Settings(dni_poll_interval=0.5, dni_timeout=3)
    sync = DniPhoneSync.from_settings(make_page(), config)
    assert sync.interval == 0.5
    assert sync.timeout == 3
