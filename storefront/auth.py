"""
Auth gate against the store API.

A successful login stores the returned token in durable storage; being
authenticated means a token is present. The token is not tied to the cart:
every login shares the same process-wide cart.
"""
import asyncio
from typing import Optional

import httpx

from storefront.db import LocalStorage, StorageError
from storefront.errors import ERROR_LOGIN_FAILED, AuthenticationError
from storefront.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)


class AuthService:
    def __init__(self, http_client: httpx.AsyncClient, storage: LocalStorage, token_key: str = "token"):
        self.http = http_client
        self.storage = storage
        self.token_key = token_key

    @property
    def token(self) -> Optional[str]:
        try:
            return self.storage.get(self.token_key)
        except StorageError as e:
            logger.error(f"Failed to read auth token: {e}")
            return None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    async def login(self, username: str, password: str) -> str:
        """Exchange credentials for a token. Raises AuthenticationError on any failure."""
        safe_user = sanitize_string_for_logging(username)
        try:
            response = await self.http.post(
                "/auth/login",
                json={"username": username, "password": password},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Login request for {safe_user} failed: {e}")
            raise AuthenticationError(ERROR_LOGIN_FAILED) from e

        if not response.is_success:
            logger.info(f"Login rejected for {safe_user} (HTTP {response.status_code})")
            raise AuthenticationError(ERROR_LOGIN_FAILED)

        try:
            token = response.json().get("token")
        except (ValueError, AttributeError) as e:
            raise AuthenticationError(ERROR_LOGIN_FAILED) from e
        if not token or not isinstance(token, str):
            raise AuthenticationError(ERROR_LOGIN_FAILED)

        try:
            await asyncio.to_thread(self.storage.set, self.token_key, token)
        except StorageError as e:
            logger.error(f"Failed to store auth token: {e}", exc_info=True)
            raise AuthenticationError(ERROR_LOGIN_FAILED) from e

        logger.info(f"User {safe_user} logged in")
        return token

    def logout(self) -> None:
        try:
            self.storage.delete(self.token_key)
        except StorageError as e:
            logger.error(f"Failed to remove auth token: {e}", exc_info=True)
        logger.info("User logged out")
