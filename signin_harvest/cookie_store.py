#!/usr/bin/env python3
"""
Cookie Cache and Query Layer
"""

import json
import time
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Pattern, Tuple, Union

from requests.cookies import RequestsCookieJar

from .exceptions import ConfigurationError
from .utils import compile_pattern

logger = logging.getLogger(__name__)

ALL = 'all'
MATCH_ALL = '.'

TriState = Union[bool, str]

@dataclass(frozen=True)
class Cookie:
    """Immutable snapshot of one browser cookie"""
    name: str
    value: str
    domain: str = ''
    path: str = '/'
    secure: bool = False
    http_only: bool = False
    expires: Optional[float] = None
    same_site: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Cookie':
        """
        Build a cookie from a driver cookie dictionary

        Accepts camelCase keys (httpOnly, sameSite) as well as the snake_case
        names used by to_dict(). Selenium reports expiry under 'expiry',
        puppeteer under 'expires' with -1 for session cookies.
        """
        expires = data.get('expires', data.get('expiry'))
        if expires is not None:
            expires = float(expires)
            if expires < 0:
                expires = None

        return cls(
            name=data['name'],
            value=data.get('value', ''),
            domain=data.get('domain', ''),
            path=data.get('path', '/'),
            secure=bool(data.get('secure', False)),
            http_only=bool(data.get('httpOnly', data.get('http_only', False))),
            expires=expires,
            same_site=data.get('sameSite', data.get('same_site')),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'name': self.name,
            'value': self.value,
            'domain': self.domain,
            'path': self.path,
            'secure': self.secure,
            'http_only': self.http_only,
            'expires': self.expires,
            'same_site': self.same_site,
        }

    def is_expired(self, now: float = None) -> bool:
        """Session cookies (no expiry) never count as expired"""
        if self.expires is None:
            return False
        if now is None:
            now = time.time()
        return self.expires < now

@dataclass(frozen=True)
class CookieFilter:
    """Conjunctive cookie query; string patterns are compiled at query time"""
    domain: Union[str, Pattern] = MATCH_ALL
    path: Union[str, Pattern] = MATCH_ALL
    expired: TriState = ALL
    http_only: TriState = ALL
    secure: TriState = ALL

    def __post_init__(self):
        for name in ('expired', 'http_only', 'secure'):
            value = getattr(self, name)
            if not isinstance(value, bool) and value != ALL:
                raise ConfigurationError(
                    f"Filter field '{name}' must be True, False or '{ALL}', got {value!r}"
                )

    def matches(self, cookie: Cookie, now: float = None) -> bool:
        """Check a single cookie against every predicate"""
        if now is None:
            now = time.time()

        return (
            _pattern_matches(self.domain, cookie.domain)
            and _pattern_matches(self.path, cookie.path)
            and _tri_state_matches(self.http_only, cookie.http_only)
            and _tri_state_matches(self.secure, cookie.secure)
            and _tri_state_matches(self.expired, cookie.is_expired(now))
        )

def _pattern_matches(pattern: Union[str, Pattern], value: str) -> bool:
    # '.' alone also matches an empty domain or path
    if getattr(pattern, 'pattern', pattern) == MATCH_ALL:
        return True
    return compile_pattern(pattern).search(value) is not None

def _tri_state_matches(expected: TriState, actual: bool) -> bool:
    if expected == ALL:
        return True
    return expected == actual

class CookieStore:
    """Holds the last captured cookie set and answers queries against it"""

    def __init__(self, cookies: Iterable[Cookie] = ()):
        self._cookies: Tuple[Cookie, ...] = tuple(cookies)

    def replace(self, cookies: Iterable[Union[Cookie, Dict[str, Any]]]):
        """Swap in a complete new cookie set"""
        self._cookies = tuple(
            cookie if isinstance(cookie, Cookie) else Cookie.from_dict(cookie)
            for cookie in cookies
        )
        logger.debug(f"Cached {len(self._cookies)} cookies")

    def clear(self):
        """Drop every cached cookie"""
        self._cookies = ()

    def has_cookies(self) -> bool:
        return len(self._cookies) > 0

    def __len__(self) -> int:
        return len(self._cookies)

    def get_cookies(self, cookie_filter: CookieFilter = None, **criteria) -> List[Cookie]:
        """
        Query cached cookies

        Args:
            cookie_filter: CookieFilter to apply (optional)
            **criteria: CookieFilter fields, used when no filter object is given

        Returns:
            Matching cookies in capture order
        """
        if cookie_filter is None:
            cookie_filter = CookieFilter(**criteria)
        elif criteria:
            raise ConfigurationError("Pass either a CookieFilter or keyword criteria, not both")

        cookies = self._cookies
        if not cookies:
            logger.warning("No cookies cached, call signin() first")
            return []

        now = time.time()
        return [cookie for cookie in cookies if cookie_filter.matches(cookie, now)]

    def get_cookies_map(self) -> Dict[str, str]:
        """Name to value map, later cookies win on duplicate names"""
        return {cookie.name: cookie.value for cookie in self._cookies}

    def to_json(self) -> str:
        return json.dumps(self.get_cookies_map(), separators=(',', ':'), ensure_ascii=False)

    def to_header(self) -> str:
        """Render as a Cookie request header value"""
        return '; '.join(f"{cookie.name}={cookie.value}" for cookie in self._cookies)

    def __str__(self) -> str:
        return self.to_header()

    def to_requests_jar(self) -> RequestsCookieJar:
        """Copy the cached cookies into a requests cookie jar"""
        jar = RequestsCookieJar()
        for cookie in self._cookies:
            rest = {'HttpOnly': None} if cookie.http_only else {}
            jar.set(
                cookie.name,
                cookie.value,
                domain=cookie.domain,
                path=cookie.path,
                secure=cookie.secure,
                expires=int(cookie.expires) if cookie.expires is not None else None,
                rest=rest,
            )
        return jar
