"""
Unit tests for the Selenium driver adapter
"""
import pytest
from unittest.mock import Mock, patch
from selenium.common.exceptions import InvalidSessionIdException, WebDriverException
from selenium.webdriver.common.by import By

from signin_harvest.drivers.selenium_driver import (
    SeleniumBrowser,
    SeleniumDriver,
    SeleniumElement,
    SeleniumPage
)
from signin_harvest.exceptions import ConfigurationError


class TestSeleniumPage:
    """Test page operations against a mocked WebDriver"""

    @pytest.fixture
    def driver(self):
        driver = Mock()
        driver.find_elements.return_value = []
        driver.get_cookies.return_value = [{'name': 'a', 'value': '1'}]
        return driver

    @pytest.fixture
    def page(self, driver):
        return SeleniumPage(driver, timeout=5)

    @pytest.mark.asyncio
    async def test_goto_fires_load(self, page, driver):
        loads = []
        page.on('load', lambda: loads.append(True))

        await page.goto('https://example.com')

        driver.get.assert_called_once_with('https://example.com')
        driver.find_element.assert_called_once_with(By.TAG_NAME, 'html')
        assert loads == [True]

    @pytest.mark.asyncio
    async def test_query_selector_missing(self, page, driver):
        assert await page.query_selector('#nope') is None
        driver.find_elements.assert_called_once_with(By.CSS_SELECTOR, '#nope')

    @pytest.mark.asyncio
    async def test_query_selector_returns_first_match(self, page, driver):
        first, second = Mock(), Mock()
        driver.find_elements.return_value = [first, second]

        element = await page.query_selector('input')

        assert isinstance(element, SeleniumElement)
        await element.type('ab')
        assert [c.args for c in first.send_keys.call_args_list] == [('a',), ('b',)]
        second.send_keys.assert_not_called()

    @pytest.mark.asyncio
    async def test_click_without_delay(self, page, driver):
        web_element = Mock()
        driver.find_elements.return_value = [web_element]

        element = await page.query_selector('button')
        await element.click()

        web_element.click.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_click_with_delay_holds_mouse(self, page, driver):
        web_element = Mock()
        driver.find_elements.return_value = [web_element]

        with patch('signin_harvest.drivers.selenium_driver.ActionChains') as chains:
            element = await page.query_selector('button')
            await element.click(delay=0.1)

        chains.assert_called_once_with(driver)
        chains.return_value.click_and_hold.assert_called_once_with(web_element)
        web_element.click.assert_not_called()

    @pytest.mark.asyncio
    async def test_cookies_and_clear(self, page, driver):
        assert await page.cookies() == [{'name': 'a', 'value': '1'}]
        await page.clear_cookies()
        driver.delete_all_cookies.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_screenshot(self, page, driver):
        await page.screenshot('/tmp/shot.png')
        driver.save_screenshot.assert_called_once_with('/tmp/shot.png')

    @pytest.mark.asyncio
    async def test_session_failure_fires_error(self, page, driver):
        failure = InvalidSessionIdException("invalid session id")
        driver.get_cookies.side_effect = failure
        errors = []
        page.on('error', errors.append)

        with pytest.raises(InvalidSessionIdException):
            await page.cookies()

        assert errors == [failure]

    @pytest.mark.asyncio
    async def test_ordinary_webdriver_error_does_not_fire(self, page, driver):
        driver.find_elements.side_effect = WebDriverException("invalid selector")
        errors = []
        page.on('error', errors.append)

        with pytest.raises(WebDriverException):
            await page.query_selector('::bad')

        assert errors == []

    def test_unsupported_page_event(self, page):
        with pytest.raises(ValueError):
            page.on('popup', Mock())


class TestSeleniumBrowser:

    @pytest.mark.asyncio
    async def test_single_page_and_quit(self):
        driver = Mock()
        browser = SeleniumBrowser(driver, timeout=5)

        page = await browser.new_page()
        assert await browser.new_page() is page

        await browser.close()
        driver.quit.assert_called_once_with()


class TestSeleniumDriver:
    """Test WebDriver creation"""

    def test_default_config(self):
        driver = SeleniumDriver({'timeout': 10})
        assert driver.config['browser'] == 'chrome'
        assert driver.config['timeout'] == 10

    @pytest.mark.asyncio
    @patch('signin_harvest.drivers.selenium_driver.ChromeService')
    @patch('signin_harvest.drivers.selenium_driver.ChromeDriverManager')
    @patch('signin_harvest.drivers.selenium_driver.webdriver')
    async def test_launch_chrome_headless(self, mock_webdriver, mock_manager, mock_service):
        web_driver = mock_webdriver.Chrome.return_value

        browser = await SeleniumDriver().launch(headless=True)

        assert isinstance(browser, SeleniumBrowser)
        assert browser.driver is web_driver
        options = mock_webdriver.Chrome.call_args.kwargs['options']
        assert '--headless=new' in options.arguments
        web_driver.implicitly_wait.assert_called_once_with(0)
        web_driver.set_page_load_timeout.assert_called_once_with(30)

    @pytest.mark.asyncio
    @patch('signin_harvest.drivers.selenium_driver.FirefoxService')
    @patch('signin_harvest.drivers.selenium_driver.GeckoDriverManager')
    @patch('signin_harvest.drivers.selenium_driver.webdriver')
    async def test_launch_firefox_visible(self, mock_webdriver, mock_manager, mock_service):
        await SeleniumDriver({'browser': 'firefox'}).launch(headless=False)

        options = mock_webdriver.Firefox.call_args.kwargs['options']
        assert '--headless' not in options.arguments

    @pytest.mark.asyncio
    async def test_unsupported_browser(self):
        with pytest.raises(ConfigurationError):
            await SeleniumDriver({'browser': 'netscape'}).launch()
