"""Unit tests for AuthService."""

from __future__ import annotations

import asyncio

import pytest

from fakes import FakeAuthProvider

from chromatask_cli.models.exceptions import AuthError
from chromatask_cli.services.auth_service import AuthService


def test_listener_receives_current_state_immediately(auth_provider):
    service = AuthService(auth_provider)
    seen = []

    service.on_auth_state_changed(seen.append)

    assert seen == [None]


@pytest.mark.asyncio
async def test_login_and_logout_notify_listeners(auth_provider, user):
    service = AuthService(auth_provider)
    seen = []
    service.on_auth_state_changed(seen.append)

    assert await service.login() == user
    assert service.is_authenticated()
    await service.logout()

    assert seen == [None, user, None]
    assert not service.is_authenticated()


@pytest.mark.asyncio
async def test_unsubscribe(auth_provider):
    service = AuthService(auth_provider)
    seen = []
    unsubscribe = service.on_auth_state_changed(seen.append)
    unsubscribe()
    unsubscribe()

    await service.login()

    assert seen == [None]


@pytest.mark.asyncio
async def test_cancelled_login_returns_none():
    service = AuthService(FakeAuthProvider(user=None))
    seen = []
    service.on_auth_state_changed(seen.append)

    assert await service.login() is None
    assert seen == [None]


@pytest.mark.asyncio
@pytest.mark.parametrize("category", ["popup_blocked", "network", "invalid_credentials"])
async def test_login_errors_carry_category(category):
    service = AuthService(FakeAuthProvider(error=AuthError(category)))

    with pytest.raises(AuthError) as exc_info:
        await service.login()

    assert exc_info.value.category == category
    assert str(exc_info.value)
    assert not service.login_in_flight


@pytest.mark.asyncio
async def test_second_login_while_in_flight_is_ignored(user):
    release = asyncio.Event()

    class SlowProvider(FakeAuthProvider):
        async def sign_in(self):
            await release.wait()
            return await super().sign_in()

    provider = SlowProvider(user)
    service = AuthService(provider)

    first = asyncio.create_task(service.login())
    await asyncio.sleep(0)
    assert service.login_in_flight

    assert await service.login() is None

    release.set()
    assert await first == user
    assert provider.sign_in_calls == 1
