#!/usr/bin/env python3
"""
Credential and Submit Input Resolution

A configured input target is either a CSS selector or a callback that
drives the page itself.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Selector:
    """Locate the first element matching a CSS selector"""
    selector: str

    async def fill(self, page, value: str, field_name: str, delay: float):
        element = await self._locate(page, f"type {field_name}")
        if element is not None:
            await element.type(value, delay=delay)

    async def submit(self, page, delay: float):
        element = await self._locate(page, "click submit")
        if element is not None:
            await element.click(delay=delay)

    async def _locate(self, page, operation: str):
        element = await page.query_selector(self.selector) if self.selector else None
        if element is None:
            logger.warning(f"No element found for selector {self.selector!r}, skipped: {operation}")
        return element

@dataclass(frozen=True)
class Action:
    """Hand the page to a callback; no element lookup happens"""
    callback: Callable[..., Any]

    async def fill(self, page, value: str, field_name: str, delay: float):
        await _maybe_await(self.callback(page, value))

    async def submit(self, page, delay: float):
        await _maybe_await(self.callback(page))

InputSpec = Union[Selector, Action]

async def _maybe_await(result):
    if inspect.isawaitable(result):
        await result

def as_input_spec(value: Union[InputSpec, str, Callable, None], field_name: str = 'input') -> InputSpec:
    """
    Coerce a raw option value into an InputSpec

    Args:
        value: Selector/Action, a selector string, a callable or None
        field_name: Option name used in error messages

    Returns:
        Selector or Action
    """
    if isinstance(value, (Selector, Action)):
        return value
    if value is None:
        return Selector('')
    if isinstance(value, str):
        return Selector(value)
    if callable(value):
        return Action(value)
    raise ConfigurationError(
        f"Option '{field_name}' must be a selector string or a callable, got {type(value).__name__}"
    )

class InputResolver:
    """Apply credential and submit targets against the active page"""

    def __init__(self, type_delay: float = 0.05, click_delay: float = 0.0):
        self.type_delay = type_delay
        self.click_delay = click_delay

    async def fill(self, page, spec: InputSpec, value: str, field_name: str):
        """Type a credential into its input, or hand it to the callback"""
        await spec.fill(page, value, field_name, self.type_delay)

    async def submit(self, page, spec: InputSpec):
        """Click the submit element, or run the submit callback"""
        await spec.submit(page, self.click_delay)
