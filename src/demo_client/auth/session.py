"""Login/logout flow - the only writer of the credential store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from demo_client.auth.store import TokenStore
from demo_client.types import Credential, UserProfile

if TYPE_CHECKING:
    from demo_client.api.client import APIClient

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    """
    Account operations that create or clear the stored credential.

    Attributes:
        api: Client used for the /auth endpoints.
        tokens: The same store the client reads on every request.

    Example:
        session = AuthSession(api=client, tokens=client.tokens)
        await session.login("ada@example.com", "secret")
        profile = await session.current_user()
        session.logout()
    """

    api: APIClient
    tokens: TokenStore

    @property
    def is_authenticated(self) -> bool:
        return self.tokens.get() is not None

    async def register(self, email: str, password: str, name: str) -> UserProfile:
        """Create an account. Does not log in."""
        profile = await self.api.register(email, password, name)
        logger.info("Registered account %s", profile.email)
        return profile

    async def login(self, email: str, password: str) -> Credential:
        """
        Exchange credentials for tokens and store them.

        The store is only written after the server accepts the login; a
        failed login leaves any previous credential in place.
        """
        credential = await self.api.login(email, password)
        self.tokens.set(credential)
        logger.info("Logged in as %s", email)
        return credential

    def logout(self) -> None:
        """Forget the stored credential. No server call is made."""
        self.tokens.clear()
        logger.info("Logged out")

    async def current_user(self) -> UserProfile:
        return await self.api.get_current_user()
