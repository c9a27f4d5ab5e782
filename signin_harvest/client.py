#!/usr/bin/env python3
"""
Sign-in Client - drives a login page and harvests the resulting cookies
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import requests

from .config import ClientOptions, SigninArgs, SigninOptions
from .cookie_store import Cookie, CookieFilter, CookieStore
from .drivers import BrowserDriver, BrowserHandle, PageHandle, SeleniumDriver
from .events import EventHub, Listener, SigninEvent
from .exceptions import (
    ConcurrentSigninError,
    ConfigurationError,
    LifecycleError,
    NavigationError,
    SessionError,
    SigninFailedError,
    SigninHarvestError
)
from .inputs import InputResolver

logger = logging.getLogger(__name__)

class BaseSigninClient(ABC):
    """Public surface shared by SigninClient and GuardedClient"""

    @property
    @abstractmethod
    def options(self) -> ClientOptions:
        pass

    @property
    @abstractmethod
    def is_launched(self) -> bool:
        pass

    @abstractmethod
    async def launch(self):
        pass

    @abstractmethod
    def set_options(self, **changes) -> ClientOptions:
        pass

    @abstractmethod
    def get_options(self) -> ClientOptions:
        pass

    @abstractmethod
    def on(self, event: Union[SigninEvent, str], listener: Listener):
        pass

    @abstractmethod
    def handle_error(self, error: Exception):
        pass

    @abstractmethod
    async def signin(self, username: str, password: str,
                     options: Union[SigninOptions, Mapping[str, Any], None] = None) -> Dict[str, str]:
        pass

    @abstractmethod
    def get_cookies(self, cookie_filter: CookieFilter = None, **criteria) -> List[Cookie]:
        pass

    @abstractmethod
    def get_cookies_map(self) -> Dict[str, str]:
        pass

    @abstractmethod
    def has_cookies(self) -> bool:
        pass

    @abstractmethod
    async def clear_cookies(self):
        pass

    @abstractmethod
    def to_json(self) -> str:
        pass

    @abstractmethod
    def to_string(self) -> str:
        pass

    @abstractmethod
    def to_requests_session(self) -> requests.Session:
        pass

    @abstractmethod
    async def close(self):
        pass

    def __str__(self) -> str:
        return self.to_string() or ''

    async def __aenter__(self):
        await self.launch()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

class SigninClient(BaseSigninClient):
    """Central sign-in coordinator"""

    def __init__(self, options: ClientOptions = None, driver: BrowserDriver = None, **option_kwargs):
        """
        Initialize sign-in client

        Args:
            options: Client options (defaults to ClientOptions())
            driver: Browser driver (defaults to SeleniumDriver())
            **option_kwargs: ClientOptions fields merged over options
        """
        self._options = (options or ClientOptions()).merge(**option_kwargs)
        self._driver = driver or SeleniumDriver()

        # Session state
        self._browser: Optional[BrowserHandle] = None
        self._page: Optional[PageHandle] = None

        self._events = EventHub()
        self._cookies = CookieStore()
        self._signin_active = False

    def __repr__(self) -> str:
        return f"<SigninClient url={self._options.signin_url!r} launched={self.is_launched}>"

    @property
    def options(self) -> ClientOptions:
        return self._options

    @options.setter
    def options(self, value):
        self.handle_error(ConfigurationError("Client options are read-only, use set_options()"))

    @property
    def is_launched(self) -> bool:
        return self._browser is not None and self._page is not None

    async def launch(self):
        """Start the browser and open the page used for signing in"""
        if self.is_launched:
            logger.debug("Browser already launched")
            return

        try:
            self._browser = await self._driver.launch(headless=not self._options.debug)
            self._page = await self._browser.new_page()
        except Exception as e:
            logger.error(f"Browser launch failed: {e}")
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            raise SessionError(f"Browser launch failed: {e}") from e

        logger.info(f"Browser launched (headless={not self._options.debug})")

    def set_options(self, **changes) -> ClientOptions:
        """Merge changes into a new options object and make it current"""
        self._options = self._options.merge(**changes)
        return self._options

    def get_options(self) -> ClientOptions:
        return self._options

    def on(self, event: Union[SigninEvent, str], listener: Listener):
        """Register a listener for readySignin, beforeSubmit, beforeNavigation or error"""
        self._events.on(event, listener)

    def handle_error(self, error: Exception):
        """Hand an error to the error listeners, or raise it when there are none"""
        if not self._events.emit_error(error):
            raise error

    async def signin(self, username: str, password: str,
                     options: Union[SigninOptions, Mapping[str, Any], None] = None) -> Dict[str, str]:
        """
        Run one sign-in attempt

        Args:
            username: Value for the username input
            password: Value for the password input
            options: SigninOptions or mapping; 'jump' controls the post-submit navigation wait

        Returns:
            Cookie name to value map, or {} when the attempt failed and an
            error listener handled it
        """
        signin_options = SigninOptions.coerce(options)

        if self._signin_active:
            self.handle_error(ConcurrentSigninError("A sign-in attempt is already in progress on this client"))
            return {}

        if not self.is_launched:
            self.handle_error(LifecycleError("Cannot call signin() before launch()"))
            return {}

        config = self._options
        page = self._page
        args = SigninArgs(username, password, signin_options)
        resolver = InputResolver(config.type_delay, config.click_delay)

        page_errors: List[Exception] = []

        def on_page_error(error):
            page_errors.append(error)

        self._signin_active = True
        page.on('error', on_page_error)
        try:
            await self._navigate(page, config.signin_url)
            self._raise_page_error(page_errors)

            # Nothing from an earlier attempt may survive into this one
            self._cookies.clear()
            await self._events.emit(SigninEvent.READY_SIGNIN, page, args)

            await resolver.fill(page, config.username, username, 'username')
            await resolver.fill(page, config.password, password, 'password')
            self._raise_page_error(page_errors)
            await self._events.emit(SigninEvent.BEFORE_SUBMIT, page, args)

            await resolver.submit(page, config.submit)
            self._raise_page_error(page_errors)
            await self._events.emit(SigninEvent.BEFORE_NAVIGATION, page, args)

            if signin_options.jump:
                await self._wait_for_navigation(page)
            self._raise_page_error(page_errors)

            self._cookies.replace(await page.cookies())
        except Exception as e:
            error = e if isinstance(e, SigninHarvestError) else _wrap_failure(e)
            await self._fail(page, error)
            return {}
        finally:
            page.remove_listener('error', on_page_error)
            self._signin_active = False

        logger.info(f"Sign-in finished with {len(self._cookies)} cookies")
        return self._cookies.get_cookies_map()

    async def _navigate(self, page: PageHandle, url: str):
        if not url:
            raise NavigationError("No signin_url configured")
        try:
            await page.goto(url)
        except Exception as e:
            raise NavigationError(f"Failed to load {url}: {e}") from e

    async def _wait_for_navigation(self, page: PageHandle):
        try:
            await page.wait_for_navigation()
        except Exception as e:
            raise NavigationError(f"Navigation after submit did not settle: {e}") from e

    @staticmethod
    def _raise_page_error(page_errors: List[Exception]):
        if page_errors:
            error = page_errors[0]
            raise SessionError(f"Page reported an error: {error}") from error

    async def _fail(self, page: PageHandle, error: SigninHarvestError):
        logger.error(f"Sign-in failed: {error}")
        if self._options.screenshot_dir:
            await self._save_failure_screenshot(page)
        self.handle_error(error)

    async def _save_failure_screenshot(self, page: PageHandle):
        screenshot_dir = Path(self._options.screenshot_dir)
        screenshot_dir.mkdir(parents=True, exist_ok=True)
        path = screenshot_dir / f"signin_{datetime.now().strftime('%Y%m%d_%H%M%S')}.png"
        try:
            await page.screenshot(str(path))
            logger.info(f"Saved failure screenshot: {path}")
        except Exception as e:
            logger.warning(f"Failed to take screenshot: {e}")

    def get_cookies(self, cookie_filter: CookieFilter = None, **criteria) -> List[Cookie]:
        """Cached cookies matching the filter (all of them by default)"""
        return self._cookies.get_cookies(cookie_filter, **criteria)

    def get_cookies_map(self) -> Dict[str, str]:
        return self._cookies.get_cookies_map()

    def has_cookies(self) -> bool:
        return self._cookies.has_cookies()

    async def clear_cookies(self):
        """Empty the browser's cookie jar and the local cache"""
        if not self.is_launched:
            self.handle_error(LifecycleError("Cannot call clear_cookies() before launch()"))
            return

        try:
            await self._page.clear_cookies()
        except Exception as e:
            self.handle_error(SessionError(f"Failed to clear browser cookies: {e}"))
            return
        self._cookies.clear()

    def to_json(self) -> str:
        return self._cookies.to_json()

    def to_string(self) -> str:
        return self._cookies.to_header()

    def to_requests_session(self) -> requests.Session:
        """Create requests.Session carrying the harvested cookies"""
        session = requests.Session()
        session.cookies.update(self._cookies.to_requests_jar())
        return session

    async def close(self):
        """Close the page and the browser"""
        page, browser = self._page, self._browser
        self._page = None
        self._browser = None
        try:
            if page is not None:
                await page.close()
        finally:
            if browser is not None:
                await browser.close()
        logger.info("Browser closed")

def _wrap_failure(error: Exception) -> SigninFailedError:
    failure = SigninFailedError(f"Sign-in failed: {error}")
    failure.__cause__ = error
    return failure
