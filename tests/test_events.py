"""
Unit tests for EventHub
"""
import pytest
from unittest.mock import Mock, AsyncMock

from signin_harvest.events import EventHub, SigninEvent
from signin_harvest.exceptions import ConfigurationError


class TestEventHub:
    """Test listener registration and delivery"""

    @pytest.fixture
    def hub(self):
        return EventHub()

    def test_accepts_event_names(self, hub):
        listener = Mock()
        hub.on('readySignin', listener)
        assert hub.listeners(SigninEvent.READY_SIGNIN) == [listener]

    def test_unknown_event_rejected(self, hub):
        with pytest.raises(ConfigurationError, match="Unknown event"):
            hub.on('afterSubmit', Mock())

    def test_non_callable_listener_rejected(self, hub):
        with pytest.raises(ConfigurationError):
            hub.on('error', 'not callable')

    @pytest.mark.asyncio
    async def test_emit_in_registration_order(self, hub):
        order = []
        hub.on('beforeSubmit', lambda page, args: order.append('first'))
        hub.on('beforeSubmit', lambda page, args: order.append('second'))

        await hub.emit(SigninEvent.BEFORE_SUBMIT, 'page', 'args')

        assert order == ['first', 'second']

    @pytest.mark.asyncio
    async def test_emit_awaits_coroutine_listeners(self, hub):
        listener = AsyncMock()
        hub.on('readySignin', listener)

        await hub.emit(SigninEvent.READY_SIGNIN, 'page', 'args')

        listener.assert_awaited_once_with('page', 'args')

    @pytest.mark.asyncio
    async def test_listener_error_propagates(self, hub):
        hub.on('readySignin', Mock(side_effect=RuntimeError("boom")))
        with pytest.raises(RuntimeError):
            await hub.emit(SigninEvent.READY_SIGNIN, 'page', 'args')

    def test_emit_error_without_listeners(self, hub):
        assert hub.emit_error(ValueError("x")) is False

    def test_emit_error_reaches_every_listener(self, hub):
        first, second = Mock(), Mock()
        hub.on('error', first)
        hub.on('error', second)
        error = ValueError("x")

        assert hub.emit_error(error) is True
        first.assert_called_once_with(error)
        second.assert_called_once_with(error)

    def test_has_listeners(self, hub):
        assert hub.has_listeners('error') is False
        hub.on(SigninEvent.ERROR, Mock())
        assert hub.has_listeners('error') is True
