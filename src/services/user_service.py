"""
UserService - Local accounts and the current session

Mock account store kept on this device only. Passwords are stored and
compared as typed: this is a convenience profile switcher, not
authentication.
"""

import logging
import time
from typing import List, Optional

from src.exceptions import AuthenticationError, ValidationError
from src.models.user import StoredAccount, User
from src.storage.local_store import LocalStore

logger = logging.getLogger(__name__)

USERS_KEY = "livremente_users"
SESSION_KEY = "livremente_current_session"


class UserService:
    """
    Service for local sign-up, login and logout.

    Responsibilities:
    - Keep the list of local accounts
    - Remember which user is signed in between runs
    """

    def __init__(self, store: LocalStore):
        self.store = store

    async def _accounts(self) -> List[StoredAccount]:
        data = await self.store.get(USERS_KEY, default=[])
        return [StoredAccount.model_validate(item) for item in data]

    async def signup(self, email: str, name: str, password: str) -> User:
        """
        Create an account and sign it in

        Raises:
            AuthenticationError: email already registered
            ValidationError: missing email or password
        """
        email = email.strip().lower()
        if not email:
            raise ValidationError("Email is required", field="email")
        if not password:
            raise ValidationError("Password is required", field="password")

        accounts = await self._accounts()
        if any(a.email == email for a in accounts):
            raise AuthenticationError(
                "Email already registered",
                operation="signup",
                user_message="This email is already registered."
            )

        account = StoredAccount(id=str(time.time_ns() // 1_000_000), email=email, name=name, password=password)
        accounts.append(account)
        await self.store.set(USERS_KEY, [a.model_dump() for a in accounts])
        logger.info(f"Created local account {account.id}")

        user = account.to_user()
        await self._set_current(user)
        return user

    async def login(self, email: str, password: str) -> User:
        """
        Sign in an existing account

        Raises:
            AuthenticationError: unknown email or wrong password
        """
        email = email.strip().lower()
        for account in await self._accounts():
            if account.email == email and account.password == password:
                user = account.to_user()
                await self._set_current(user)
                logger.info(f"User {user.id} signed in")
                return user
        raise AuthenticationError("Invalid credentials", operation="login")

    async def logout(self) -> None:
        await self.store.remove(SESSION_KEY)

    async def current_user(self) -> Optional[User]:
        """User remembered from the last sign-in, if any"""
        data = await self.store.get(SESSION_KEY)
        return User.model_validate(data) if data else None

    async def _set_current(self, user: User) -> None:
        await self.store.set(SESSION_KEY, user.model_dump())
