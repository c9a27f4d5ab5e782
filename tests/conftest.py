"""
Test configuration and shared fixtures for signin_harvest tests
"""
import time
import pytest
import tempfile
import shutil
from pathlib import Path

from signin_harvest.drivers.base_driver import BrowserDriver, BrowserHandle, ElementHandle, PageHandle


class FakeElement(ElementHandle):
    """Element that records typing and clicks into the page's call log"""

    def __init__(self, page, selector):
        self.page = page
        self.selector = selector

    async def type(self, value, delay=0.0):
        self.page.calls.append(('type', self.selector, value, delay))

    async def click(self, delay=0.0):
        self.page.calls.append(('click', self.selector, delay))
        if self.page.on_click is not None:
            self.page.on_click()


class FakePage(PageHandle):
    """In-memory page; selectors listed in `elements` resolve, everything else is missing"""

    def __init__(self, elements=(), cookies=None):
        super().__init__()
        self.elements = set(elements)
        self.jar = list(cookies or [])
        self.calls = []
        self.closed = False
        self.goto_error = None
        self.navigation_error = None
        self.clear_error = None
        self.on_click = None

    def handler_count(self, event):
        return len(self._handlers[event])

    def fail_session(self, error):
        self._fire('error', error)

    async def goto(self, url):
        self.calls.append(('goto', url))
        if self.goto_error is not None:
            raise self.goto_error
        self._fire('load')

    async def query_selector(self, selector):
        self.calls.append(('query', selector))
        if selector in self.elements:
            return FakeElement(self, selector)
        return None

    async def wait_for_navigation(self):
        self.calls.append(('wait_for_navigation',))
        if self.navigation_error is not None:
            raise self.navigation_error
        self._fire('load')

    async def cookies(self):
        self.calls.append(('cookies',))
        return list(self.jar)

    async def clear_cookies(self):
        self.calls.append(('clear_cookies',))
        if self.clear_error is not None:
            raise self.clear_error
        self.jar = []

    async def screenshot(self, path):
        self.calls.append(('screenshot', path))
        Path(path).write_bytes(b'\x89PNG')

    async def close(self):
        self.closed = True


class FakeBrowser(BrowserHandle):

    def __init__(self, page):
        self.page = page
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakeDriver(BrowserDriver):
    """Driver handing out one FakeBrowser around the given page"""

    def __init__(self, page=None, launch_error=None):
        self.page = page or FakePage()
        self.browser = FakeBrowser(self.page)
        self.launch_error = launch_error
        self.launch_calls = []

    async def launch(self, headless=True):
        self.launch_calls.append(headless)
        if self.launch_error is not None:
            raise self.launch_error
        return self.browser


LOGIN_ELEMENTS = ('#user', '#pass', '#go')


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def sample_cookies():
    """Browser cookie dictionaries as Selenium reports them"""
    future = int(time.time()) + 3600
    past = int(time.time()) - 3600
    return [
        {'name': 'a', 'value': '1', 'domain': 'x.com', 'path': '/', 'secure': True,
         'httpOnly': False, 'expiry': future},
        {'name': 'b', 'value': '2', 'domain': 'y.com', 'path': '/app', 'secure': False,
         'httpOnly': True},
        {'name': 'old', 'value': 'z', 'domain': '.x.com', 'path': '/', 'secure': False,
         'httpOnly': False, 'expiry': past},
    ]


@pytest.fixture
def login_page(sample_cookies):
    """Page with username, password and submit elements and a cookie jar"""
    return FakePage(elements=LOGIN_ELEMENTS, cookies=sample_cookies)


@pytest.fixture
def fake_driver(login_page):
    return FakeDriver(login_page)


@pytest.fixture
def login_options():
    """Client option kwargs pointing at the fake login page"""
    return {
        'signin_url': 'https://example.com/login',
        'username': '#user',
        'password': '#pass',
        'submit': '#go',
        'type_delay': 0,
    }
