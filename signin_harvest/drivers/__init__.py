#!/usr/bin/env python3
"""
Browser Driver Package
"""

from .base_driver import BrowserDriver, BrowserHandle, PageHandle, ElementHandle
from .selenium_driver import SeleniumDriver

__all__ = [
    'BrowserDriver',
    'BrowserHandle',
    'PageHandle',
    'ElementHandle',
    'SeleniumDriver'
]
