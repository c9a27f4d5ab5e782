"""
Unit tests for the launch-before-use guard
"""
import pytest
from unittest.mock import Mock

from signin_harvest import create_client
from signin_harvest.client import SigninClient
from signin_harvest.exceptions import ConfigurationError, LifecycleError
from signin_harvest.guard import GuardedClient

SESSION_CALLS = [
    ('get_cookies', ()),
    ('get_cookies_map', ()),
    ('has_cookies', ()),
    ('to_json', ()),
    ('to_string', ()),
    ('to_requests_session', ()),
]


class TestGuardedClient:
    """Test which operations are permitted before launch"""

    @pytest.fixture
    def client(self, fake_driver, login_options):
        return create_client(driver=fake_driver, **login_options)

    def test_factory_returns_guarded_client(self, client):
        assert isinstance(client, GuardedClient)
        assert client.is_launched is False

    @pytest.mark.parametrize('name,args', SESSION_CALLS)
    def test_session_call_before_launch_reported(self, client, name, args):
        errors = []
        client.on('error', errors.append)

        assert getattr(client, name)(*args) is None
        assert len(errors) == 1
        assert isinstance(errors[0], LifecycleError)
        assert f"{name}()" in str(errors[0])

    def test_session_call_before_launch_raises_without_listener(self, client):
        with pytest.raises(LifecycleError, match="before launch"):
            client.get_cookies()

    @pytest.mark.asyncio
    async def test_signin_before_launch(self, client, fake_driver):
        errors = []
        client.on('error', errors.append)

        assert await client.signin('alice', 'secret') is None
        assert isinstance(errors[0], LifecycleError)
        assert fake_driver.page.calls == []

    @pytest.mark.asyncio
    async def test_close_and_clear_before_launch(self, client):
        listener = Mock()
        client.on('error', listener)

        await client.clear_cookies()
        await client.close()

        assert listener.call_count == 2

    def test_setup_calls_allowed_before_launch(self, client):
        client.on('readySignin', Mock())
        options = client.set_options(debug=True)

        assert client.get_options() is options
        assert client.options.debug is True

    def test_options_assignment_reported_before_launch(self, client):
        errors = []
        client.on('error', errors.append)

        client.options = {'debug': True}

        assert isinstance(errors[0], ConfigurationError)
        assert client.options.debug is False

    def test_str_before_launch(self, client):
        client.on('error', Mock())
        assert str(client) == ''

    @pytest.mark.asyncio
    async def test_calls_forwarded_after_launch(self, client):
        async with client:
            cookies = await client.signin('alice', 'secret')
            assert cookies == client.get_cookies_map()
            assert client.to_string() == 'a=1; b=2; old=z'
        assert client.is_launched is False

    def test_internal_members_pass_through(self, fake_driver):
        inner = SigninClient(driver=fake_driver)
        guarded = GuardedClient(inner)
        assert guarded._driver is fake_driver

        with pytest.raises(AttributeError):
            guarded.not_an_operation
