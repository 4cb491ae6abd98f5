from __future__ import annotations

import asyncio
import time

from posthub.core.errors import BadRequestError, UnauthorizedError
from posthub.core.logging import get_logger
from posthub.core.queries import find_first
from posthub.core.security import hash_password, new_token, verify_password
from posthub.db.store import AccessToken, Store, User
from posthub.schemas import LoginUserDto, RegisterUserDto, TokenDto
from posthub.services.posts import to_datetime

log = get_logger("posthub.services.users")

INVALID_CREDENTIALS = "Invalid username or password"


class UserService:
    def __init__(self, store: Store, *, token_ttl_s: float, hash_iterations: int) -> None:
        self.store = store
        self.token_ttl_s = token_ttl_s
        self.hash_iterations = hash_iterations

    async def register(self, dto: RegisterUserDto) -> TokenDto:
        if dto.password != dto.confirm_password:
            raise BadRequestError("Passwords do not match")

        username = dto.username.casefold()
        email = dto.email.casefold()
        taken = await find_first(
            self.store.users,
            lambda u: u.username.casefold() == username or u.email.casefold() == email,
        )
        if taken is not None:
            raise BadRequestError("User with this username or email already exists")

        # PBKDF2 is CPU-bound; keep it off the event loop.
        password_hash = await asyncio.to_thread(
            hash_password, dto.password, iterations=self.hash_iterations
        )
        user = await self.store.users.add(
            User(
                username=dto.username,
                email=dto.email,
                password_hash=password_hash,
                created_at=time.time(),
            )
        )
        log.info("user registered id=%s", user.id)
        return await self._issue_token(user)

    async def login(self, dto: LoginUserDto) -> TokenDto:
        username = dto.username.casefold()
        user = await find_first(self.store.users, lambda u: u.username.casefold() == username)
        if user is None or not await asyncio.to_thread(
            verify_password, dto.password, user.password_hash
        ):
            log.info("login rejected username=%s", dto.username)
            raise UnauthorizedError(INVALID_CREDENTIALS)
        log.info("login ok user_id=%s", user.id)
        return await self._issue_token(user)

    async def authenticate(self, token: str) -> User:
        """Resolve a bearer token to its user; expired or unknown tokens fail."""
        row = await find_first(self.store.tokens, lambda t: t.token == token)
        if row is None:
            raise UnauthorizedError()
        if row.expires_at <= time.time():
            await self.store.tokens.delete(row)
            raise UnauthorizedError("Access token expired")
        user = await find_first(self.store.users, lambda u: u.id == row.user_id)
        if user is None:
            raise UnauthorizedError()
        return user

    async def _issue_token(self, user: User) -> TokenDto:
        """Replace any tokens the user already holds with a fresh one."""
        for old in await self.store.tokens.all():
            if old.user_id == user.id:
                await self.store.tokens.delete(old)
        row = await self.store.tokens.add(
            AccessToken(token=new_token(), user_id=user.id, expires_at=time.time() + self.token_ttl_s)
        )
        return TokenDto(token=row.token, expires_at=to_datetime(row.expires_at))
