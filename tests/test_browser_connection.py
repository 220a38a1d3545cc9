"""Tests for browser session acquisition and release."""
from unittest.mock import MagicMock, patch

import pytest

from formpilot.browser.connection import BrowserConnection
from formpilot.browser.page import Page
from formpilot.core.config import BrowserConfig
from formpilot.core.errors import BrowserUnavailableError


@pytest.fixture
def playwright_mock():
    """Patch sync_playwright and yield the started Playwright mock."""
    with patch("formpilot.browser.connection.sync_playwright") as sync_pw:
        started = MagicMock()
        sync_pw.return_value.start.return_value = started
        yield started


class TestLaunch:
    """Tests for local browser launch."""

    def test_launch_options(self, playwright_mock: MagicMock) -> None:
        config = BrowserConfig(headless=True, channel=None, maximize=False)
        connection = BrowserConnection(config)

        assert connection.connect() is True
        playwright_mock.chromium.launch.assert_called_once_with(
            headless=True, channel=None, args=[]
        )

    def test_maximized_launch_uses_no_viewport(self, playwright_mock: MagicMock) -> None:
        connection = BrowserConnection(BrowserConfig(maximize=True, headless=False))
        connection.connect()

        page = connection.page

        assert isinstance(page, Page)
        browser = playwright_mock.chromium.launch.return_value
        browser.new_context.assert_called_once_with(no_viewport=True)
        args = playwright_mock.chromium.launch.call_args.kwargs["args"]
        assert args == ["--start-maximized"]

    def test_fixed_viewport(self, playwright_mock: MagicMock) -> None:
        config = BrowserConfig(maximize=False, viewport_width=800, viewport_height=600)
        connection = BrowserConnection(config)
        connection.connect()
        connection.page

        browser = playwright_mock.chromium.launch.return_value
        browser.new_context.assert_called_once_with(viewport={"width": 800, "height": 600})

    def test_page_is_reused(self, playwright_mock: MagicMock) -> None:
        connection = BrowserConnection()
        connection.connect()
        assert connection.page is connection.page

    def test_launch_failure_returns_false(self, playwright_mock: MagicMock) -> None:
        playwright_mock.chromium.launch.side_effect = RuntimeError("no chrome")
        connection = BrowserConnection()

        assert connection.connect() is False
        playwright_mock.stop.assert_called_once()

    def test_browser_property_requires_connection(self) -> None:
        with pytest.raises(RuntimeError):
            BrowserConnection().browser


class TestContextManager:
    """The session is released on every exit path."""

    def test_closes_on_normal_exit(self, playwright_mock: MagicMock) -> None:
        with BrowserConnection() as connection:
            browser = connection.browser

        browser.close.assert_called_once()
        playwright_mock.stop.assert_called_once()

    def test_closes_on_error(self, playwright_mock: MagicMock) -> None:
        with pytest.raises(ValueError):
            with BrowserConnection() as connection:
                browser = connection.browser
                raise ValueError("boom")

        browser.close.assert_called_once()
        playwright_mock.stop.assert_called_once()

    def test_enter_raises_when_unavailable(self, playwright_mock: MagicMock) -> None:
        playwright_mock.chromium.launch.side_effect = RuntimeError("no chrome")
        with pytest.raises(BrowserUnavailableError):
            with BrowserConnection():
                pass


class TestCdpAttach:
    """Tests for attaching to a running Chrome."""

    def test_attach_does_not_close_user_browser(self, playwright_mock: MagicMock) -> None:
        connection = BrowserConnection(BrowserConfig(cdp_port=9333))
        with patch.object(connection, "_check_cdp_endpoint", return_value=True):
            assert connection.connect() is True

        browser = playwright_mock.chromium.connect_over_cdp.return_value
        playwright_mock.chromium.connect_over_cdp.assert_called_once_with(
            "http://127.0.0.1:9333"
        )
        connection.disconnect()
        browser.close.assert_not_called()
        playwright_mock.stop.assert_called_once()

    def test_gives_up_after_retries(self, playwright_mock: MagicMock) -> None:
        config = BrowserConfig(cdp_port=9333, connect_retries=2, retry_delay=0.0)
        connection = BrowserConnection(config)
        with patch.object(connection, "_check_cdp_endpoint", return_value=False), \
                patch("formpilot.browser.connection.time.sleep") as sleep:
            assert connection.connect() is False
        assert sleep.call_count == 2
        playwright_mock.chromium.connect_over_cdp.assert_not_called()
