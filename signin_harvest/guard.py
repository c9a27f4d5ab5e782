#!/usr/bin/env python3
"""
Lifecycle Guard

Wraps a SigninClient so that calls needing the browser session turn into a
LifecycleError on the client's error channel until launch() has run. The
denied call does nothing and returns None.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

import requests

from .client import BaseSigninClient, SigninClient
from .config import ClientOptions, SigninOptions
from .cookie_store import Cookie, CookieFilter
from .events import Listener, SigninEvent
from .exceptions import LifecycleError

class GuardedClient(BaseSigninClient):
    """SigninClient wrapper enforcing launch-before-use"""

    def __init__(self, client: SigninClient):
        self._client = client

    def __repr__(self) -> str:
        return f"<GuardedClient {self._client!r}>"

    def __getattr__(self, name: str) -> Any:
        # Internal members of the wrapped client pass through unguarded
        if name.startswith('_') and name != '_client':
            return getattr(self._client, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def _permit(self, operation: str) -> bool:
        if self._client.is_launched:
            return True
        self._client.handle_error(LifecycleError(
            f"Cannot call {operation}() before launch(): the browser session does not exist yet"
        ))
        return False

    # Always allowed

    @property
    def options(self) -> ClientOptions:
        return self._client.options

    @options.setter
    def options(self, value):
        self._client.options = value

    @property
    def is_launched(self) -> bool:
        return self._client.is_launched

    async def launch(self):
        await self._client.launch()

    def set_options(self, **changes) -> ClientOptions:
        return self._client.set_options(**changes)

    def get_options(self) -> ClientOptions:
        return self._client.get_options()

    def on(self, event: Union[SigninEvent, str], listener: Listener):
        self._client.on(event, listener)

    def handle_error(self, error: Exception):
        self._client.handle_error(error)

    # Session dependent

    async def signin(self, username: str, password: str,
                     options: Union[SigninOptions, Mapping[str, Any], None] = None) -> Optional[Dict[str, str]]:
        if not self._permit('signin'):
            return None
        return await self._client.signin(username, password, options)

    def get_cookies(self, cookie_filter: CookieFilter = None, **criteria) -> Optional[List[Cookie]]:
        if not self._permit('get_cookies'):
            return None
        return self._client.get_cookies(cookie_filter, **criteria)

    def get_cookies_map(self) -> Optional[Dict[str, str]]:
        if not self._permit('get_cookies_map'):
            return None
        return self._client.get_cookies_map()

    def has_cookies(self) -> Optional[bool]:
        if not self._permit('has_cookies'):
            return None
        return self._client.has_cookies()

    async def clear_cookies(self):
        if not self._permit('clear_cookies'):
            return None
        await self._client.clear_cookies()

    def to_json(self) -> Optional[str]:
        if not self._permit('to_json'):
            return None
        return self._client.to_json()

    def to_string(self) -> Optional[str]:
        if not self._permit('to_string'):
            return None
        return self._client.to_string()

    def to_requests_session(self) -> Optional[requests.Session]:
        if not self._permit('to_requests_session'):
            return None
        return self._client.to_requests_session()

    async def close(self):
        if not self._permit('close'):
            return None
        await self._client.close()
