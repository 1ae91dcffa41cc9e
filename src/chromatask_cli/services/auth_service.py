"""Service for handling authentication-related operations."""

from __future__ import annotations

from collections.abc import Callable

from chromatask_cli.models import User
from chromatask_cli.models.exceptions import AuthError
from chromatask_cli.repositories import AuthProvider
from chromatask_cli.utils.logger import get_logger

logger = get_logger("auth")

AuthListener = Callable[[User | None], None]


class AuthService:
    """Sign-in state of the current context.

    Listeners registered with ``on_auth_state_changed`` receive the current
    user immediately and again after every login or logout. Only one login
    may be in flight at a time.
    """

    def __init__(self, provider: AuthProvider):
        self.provider = provider
        self._listeners: list[AuthListener] = []
        self._login_in_flight = False

    @property
    def login_in_flight(self) -> bool:
        return self._login_in_flight

    def current_user(self) -> User | None:
        return self.provider.current_user()

    def is_authenticated(self) -> bool:
        """Check if a user is signed in."""
        return self.current_user() is not None

    def on_auth_state_changed(self, callback: AuthListener) -> Callable[[], None]:
        """Register *callback* and deliver the current user to it right away.

        Returns:
            A function that unregisters the callback
        """
        self._listeners.append(callback)
        callback(self.current_user())

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, user: User | None) -> None:
        for listener in list(self._listeners):
            listener(user)

    async def login(self) -> User | None:
        """Run the provider's sign-in flow.

        Returns:
            The signed-in user; None when the user cancelled or another
            login is already running

        Raises:
            AuthError: If sign-in failed (see ``AuthError.category``)
        """
        if self._login_in_flight:
            logger.debug("login already in progress; ignoring request")
            return None

        self._login_in_flight = True
        try:
            user = await self.provider.sign_in()
        except AuthError as e:
            logger.warning("login failed (%s): %s", e.category, e)
            raise
        finally:
            self._login_in_flight = False

        if user is None:
            logger.info("login cancelled")
            return None

        logger.info("signed in as %s", user.uid)
        self._notify(user)
        return user

    async def logout(self) -> None:
        """End the session and notify listeners."""
        await self.provider.sign_out()
        logger.info("signed out")
        self._notify(None)
