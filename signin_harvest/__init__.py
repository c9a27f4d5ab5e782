#!/usr/bin/env python3
"""
Sign-in Harvest
===============

Automates a web sign-in flow in a controlled browser and exposes the
resulting session cookies.

Features:
- Selector or callback driven credential and submit inputs
- Lifecycle hooks: readySignin, beforeSubmit, beforeNavigation, error
- Cookie queries by domain, path, secure/httpOnly flags and expiry
- JSON, Cookie header and requests.Session export
- Launch-before-use guard

Usage:
    from signin_harvest import create_client

    async with create_client(
        signin_url="https://example.com/login",
        username="input[name='username']",
        password="input[name='password']",
        submit="button[type='submit']",
    ) as client:
        client.on('error', print)
        cookies = await client.signin("user", "secret")
        secure = client.get_cookies(secure=True)
"""

from .client import BaseSigninClient, SigninClient
from .guard import GuardedClient
from .archive import CookieArchive
from .config import ClientOptions, SigninOptions, SigninArgs, load_options
from .cookie_store import ALL, Cookie, CookieFilter, CookieStore
from .events import EventHub, SigninEvent
from .inputs import Action, InputResolver, Selector
from .drivers import BrowserDriver, SeleniumDriver
from .exceptions import (
    SigninHarvestError,
    ConfigurationError,
    LifecycleError,
    NavigationError,
    SessionError,
    SigninFailedError,
    ConcurrentSigninError
)

__version__ = "1.0.0"

__all__ = [
    'BaseSigninClient',
    'SigninClient',
    'GuardedClient',
    'CookieArchive',
    'ClientOptions',
    'SigninOptions',
    'SigninArgs',
    'load_options',
    'ALL',
    'Cookie',
    'CookieFilter',
    'CookieStore',
    'EventHub',
    'SigninEvent',
    'Action',
    'InputResolver',
    'Selector',
    'BrowserDriver',
    'SeleniumDriver',
    'SigninHarvestError',
    'ConfigurationError',
    'LifecycleError',
    'NavigationError',
    'SessionError',
    'SigninFailedError',
    'ConcurrentSigninError',
    'create_client'
]

def create_client(options: ClientOptions = None, driver: BrowserDriver = None, **kwargs) -> GuardedClient:
    """
    Factory function for easy sign-in setup

    Args:
        options: Client options (optional)
        driver: Browser driver, SeleniumDriver by default
        **kwargs: ClientOptions fields

    Returns:
        Guarded SigninClient; session calls before launch() report a LifecycleError
    """
    return GuardedClient(SigninClient(options, driver=driver, **kwargs))
