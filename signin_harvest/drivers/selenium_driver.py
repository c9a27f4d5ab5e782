#!/usr/bin/env python3
"""
Selenium Browser Driver

Implements the driver interfaces on top of Selenium WebDriver. WebDriver
calls block, so every call runs on the event loop's default executor.
"""

import time
import asyncio
import logging
import functools
from typing import Any, Dict, List, Optional

from selenium import webdriver
from selenium.webdriver.common.by import By
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from selenium.common.exceptions import (
    InvalidSessionIdException,
    NoSuchWindowException,
    WebDriverException
)
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.firefox import GeckoDriverManager

from ..exceptions import ConfigurationError
from .base_driver import BrowserDriver, BrowserHandle, ElementHandle, PageHandle

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'browser': 'chrome',
    'timeout': 30,
    'window_size': (1920, 1080),
    'user_agent': None,
    'chrome_binary_path': None
}

async def _run_blocking(fn, *args):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(fn, *args))

def _is_session_failure(error: WebDriverException) -> bool:
    """True when the error means the page itself is gone, not just one call failing"""
    if isinstance(error, (InvalidSessionIdException, NoSuchWindowException)):
        return True
    message = str(error).lower()
    return 'crash' in message or 'disconnected' in message

class SeleniumElement(ElementHandle):
    """WebElement wrapper"""

    def __init__(self, page: 'SeleniumPage', element):
        self._page = page
        self._element = element

    async def type(self, value: str, delay: float = 0.0):
        await self._page._call(self._type_sync, value, delay)

    def _type_sync(self, value: str, delay: float):
        for char in value:
            self._element.send_keys(char)
            if delay:
                time.sleep(delay)

    async def click(self, delay: float = 0.0):
        await self._page._call(self._click_sync, delay)

    def _click_sync(self, delay: float):
        if not delay:
            self._element.click()
            return

        ActionChains(self._page.driver) \
            .click_and_hold(self._element) \
            .pause(delay) \
            .release(self._element) \
            .perform()

class SeleniumPage(PageHandle):
    """The WebDriver's current window"""

    def __init__(self, driver, timeout: float):
        super().__init__()
        self.driver = driver
        self.timeout = timeout
        # <html> of the last loaded document; goes stale when the page navigates
        self._document = None

    async def _call(self, fn, *args):
        try:
            return await _run_blocking(fn, *args)
        except WebDriverException as e:
            if _is_session_failure(e):
                logger.error(f"Browser session failed: {e}")
                self._fire('error', e)
            raise

    async def goto(self, url: str):
        await self._call(self._goto_sync, url)
        self._fire('load')

    def _goto_sync(self, url: str):
        logger.info(f"Navigating to {url}")
        self.driver.get(url)
        self._document = self.driver.find_element(By.TAG_NAME, 'html')

    async def query_selector(self, selector: str) -> Optional[SeleniumElement]:
        elements = await self._call(self.driver.find_elements, By.CSS_SELECTOR, selector)
        if not elements:
            return None
        return SeleniumElement(self, elements[0])

    async def wait_for_navigation(self):
        await self._call(self._wait_for_navigation_sync)
        self._fire('load')

    def _wait_for_navigation_sync(self):
        wait = WebDriverWait(self.driver, self.timeout)
        if self._document is not None:
            wait.until(EC.staleness_of(self._document))
        wait.until(lambda driver: driver.execute_script("return document.readyState") == "complete")
        self._document = self.driver.find_element(By.TAG_NAME, 'html')
        logger.debug(f"Navigation settled at {self.driver.current_url}")

    async def cookies(self) -> List[Dict[str, Any]]:
        return await self._call(self.driver.get_cookies)

    async def clear_cookies(self):
        await self._call(self.driver.delete_all_cookies)

    async def screenshot(self, path: str):
        await self._call(self.driver.save_screenshot, path)

    async def close(self):
        # The window lives as long as the WebDriver session; SeleniumBrowser.close() quits it
        self._document = None

class SeleniumBrowser(BrowserHandle):
    """A running WebDriver session"""

    def __init__(self, driver, timeout: float):
        self.driver = driver
        self.timeout = timeout
        self._page: Optional[SeleniumPage] = None

    async def new_page(self) -> SeleniumPage:
        if self._page is None:
            self._page = SeleniumPage(self.driver, self.timeout)
        return self._page

    async def close(self):
        try:
            await _run_blocking(self.driver.quit)
            logger.info("WebDriver cleaned up")
        finally:
            self._page = None

class SeleniumDriver(BrowserDriver):
    """Launch Chrome or Firefox through Selenium, drivers resolved by webdriver-manager"""

    def __init__(self, config: Dict[str, Any] = None):
        self.config = dict(DEFAULT_CONFIG)
        self.config.update(config or {})

    async def launch(self, headless: bool = True) -> SeleniumBrowser:
        driver = await _run_blocking(self._create_driver, headless)
        return SeleniumBrowser(driver, self.config['timeout'])

    def _create_driver(self, headless: bool):
        """Create and configure WebDriver (Chrome or Firefox)"""
        browser_type = self.config['browser']
        logger.info(f"Attempting to create {browser_type} WebDriver (headless={headless})...")

        if browser_type == 'chrome':
            driver = self._create_chrome_driver(headless)
        elif browser_type == 'firefox':
            driver = self._create_firefox_driver(headless)
        else:
            raise ConfigurationError(f"Unsupported browser: {browser_type}")

        # Lookups must report a missing element immediately
        driver.implicitly_wait(0)
        driver.set_page_load_timeout(self.config['timeout'])
        return driver

    def _create_chrome_driver(self, headless: bool):
        """Create Chrome WebDriver"""
        options = ChromeOptions()

        if self.config.get('chrome_binary_path'):
            options.binary_location = self.config['chrome_binary_path']
            logger.info(f"Using Chrome binary: {self.config['chrome_binary_path']}")

        if headless:
            options.add_argument('--headless=new')

        options.add_argument('--no-sandbox')
        options.add_argument('--disable-dev-shm-usage')
        options.add_argument('--disable-gpu')
        options.add_argument('--disable-blink-features=AutomationControlled')
        options.add_argument('--no-first-run')
        options.add_argument('--password-store=basic')
        options.add_experimental_option("excludeSwitches", ["enable-automation"])

        width, height = self.config['window_size']
        options.add_argument(f'--window-size={width},{height}')

        if self.config.get('user_agent'):
            options.add_argument(f'--user-agent={self.config["user_agent"]}')

        service = ChromeService(ChromeDriverManager().install())
        driver = webdriver.Chrome(service=service, options=options)
        logger.info(f"Created Chrome WebDriver (headless={headless})")
        return driver

    def _create_firefox_driver(self, headless: bool):
        """Create Firefox WebDriver"""
        options = FirefoxOptions()

        if headless:
            options.add_argument('--headless')

        width, height = self.config['window_size']
        options.add_argument(f'--width={width}')
        options.add_argument(f'--height={height}')

        if self.config.get('user_agent'):
            options.set_preference("general.useragent.override", self.config["user_agent"])

        options.set_preference("dom.webdriver.enabled", False)
        options.set_preference("useAutomationExtension", False)
        options.set_preference("browser.startup.homepage", "about:blank")

        service = FirefoxService(GeckoDriverManager().install())
        driver = webdriver.Firefox(service=service, options=options)
        logger.info(f"Created Firefox WebDriver (headless={headless})")
        return driver
