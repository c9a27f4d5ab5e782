#!/usr/bin/env python3
"""
Sign-in Lifecycle Events
"""

import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

class SigninEvent(str, Enum):
    """Lifecycle notifications published during a sign-in attempt"""
    READY_SIGNIN = 'readySignin'
    BEFORE_SUBMIT = 'beforeSubmit'
    BEFORE_NAVIGATION = 'beforeNavigation'
    ERROR = 'error'

Listener = Callable[..., Any]

class EventHub:
    """Ordered listener lists keyed by SigninEvent"""

    def __init__(self):
        self._listeners: Dict[SigninEvent, List[Listener]] = {event: [] for event in SigninEvent}

    @staticmethod
    def _coerce_event(event: Union[SigninEvent, str]) -> SigninEvent:
        try:
            return SigninEvent(event)
        except ValueError:
            names = ', '.join(member.value for member in SigninEvent)
            raise ConfigurationError(f"Unknown event {event!r}, expected one of: {names}") from None

    def on(self, event: Union[SigninEvent, str], listener: Listener):
        """Append a listener; the same event may have any number of them"""
        event = self._coerce_event(event)
        if not callable(listener):
            raise ConfigurationError(f"Listener for '{event.value}' must be callable")
        self._listeners[event].append(listener)

    def listeners(self, event: Union[SigninEvent, str]) -> List[Listener]:
        return list(self._listeners[self._coerce_event(event)])

    def has_listeners(self, event: Union[SigninEvent, str]) -> bool:
        return bool(self._listeners[self._coerce_event(event)])

    async def emit(self, event: SigninEvent, page: Any, args: Any):
        """Invoke hook listeners in registration order, awaiting coroutine results"""
        for listener in list(self._listeners[event]):
            result = listener(page, args)
            if inspect.isawaitable(result):
                await result

    def emit_error(self, error: Exception) -> bool:
        """
        Deliver an error to every error listener

        Returns:
            True if at least one listener received the error
        """
        listeners = list(self._listeners[SigninEvent.ERROR])
        if not listeners:
            return False

        logger.debug(f"Delivering {type(error).__name__} to {len(listeners)} error listener(s)")
        for listener in listeners:
            listener(error)
        return True
