#!/usr/bin/env python3
"""
Browser Driver Interfaces

The sign-in client talks to the browser only through these classes.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

PAGE_EVENTS = ('load', 'error')

class ElementHandle(ABC):
    """A located DOM element"""

    @abstractmethod
    async def type(self, value: str, delay: float = 0.0):
        """
        Type text into the element one character at a time

        Args:
            value: Text to type
            delay: Seconds to wait between characters
        """
        pass

    @abstractmethod
    async def click(self, delay: float = 0.0):
        """
        Click the element

        Args:
            delay: Seconds between mouse press and release
        """
        pass

class PageHandle(ABC):
    """The single active page of a browser session"""

    def __init__(self):
        self._handlers: Dict[str, List[Callable[..., Any]]] = {event: [] for event in PAGE_EVENTS}

    def on(self, event: str, handler: Callable[..., Any]):
        """Register a 'load' handler (no arguments) or an 'error' handler (the exception)"""
        if event not in self._handlers:
            raise ValueError(f"Unsupported page event: {event}")
        self._handlers[event].append(handler)

    def remove_listener(self, event: str, handler: Callable[..., Any]):
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    def _fire(self, event: str, *args):
        for handler in list(self._handlers[event]):
            handler(*args)

    @abstractmethod
    async def goto(self, url: str):
        """Navigate and wait for the page to load"""
        pass

    @abstractmethod
    async def query_selector(self, selector: str) -> Optional[ElementHandle]:
        """Return the first element matching a CSS selector, or None"""
        pass

    @abstractmethod
    async def wait_for_navigation(self):
        """Wait until the current document is replaced and the new one has loaded"""
        pass

    @abstractmethod
    async def cookies(self) -> List[Dict[str, Any]]:
        """Return every cookie visible to the page"""
        pass

    @abstractmethod
    async def clear_cookies(self):
        """Delete every cookie in the session's jar"""
        pass

    @abstractmethod
    async def screenshot(self, path: str):
        """Save a PNG screenshot of the page"""
        pass

    @abstractmethod
    async def close(self):
        pass

class BrowserHandle(ABC):
    """A running browser process"""

    @abstractmethod
    async def new_page(self) -> PageHandle:
        pass

    @abstractmethod
    async def close(self):
        pass

class BrowserDriver(ABC):
    """Factory for browser sessions"""

    @abstractmethod
    async def launch(self, headless: bool = True) -> BrowserHandle:
        """
        Start a browser

        Args:
            headless: Run without a visible window

        Returns:
            BrowserHandle for the new browser
        """
        pass
