"""
In-memory credential store.

Holds registered users and their salted password hashes.  Usernames are
unique by exact, case-sensitive match and ids are assigned sequentially
starting at 1.  Nothing here is persisted: users live for the lifetime of
the process.

Login failures never reveal whether the username exists.  An unknown
username is still checked against a throwaway hash so both failure paths
do comparable work.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace

from werkzeug.security import generate_password_hash

from .errors import DuplicateUsernameError, InvalidCredentialsError, InvalidInputError
from .models import User

logger = logging.getLogger(__name__)


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


class CredentialStore:
    """
    Registry of users, safe to share across request threads.

    Args:
        hash_method: Werkzeug hash method string with a fixed work factor.
    """

    def __init__(self, hash_method: str) -> None:
        self._hash_method = hash_method
        self._users: dict[str, User] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._dummy_hash = generate_password_hash("not-a-real-password", method=hash_method)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def register(self, username: str, password: str) -> User:
        """
        Create a new user.

        Returns:
            A copy of the stored user.  Callers should expose only
            ``to_dict()``, which omits the hash.

        Raises:
            InvalidInputError: Username or password missing or blank.
            DuplicateUsernameError: Username already registered.
        """
        if _is_blank(username) or _is_blank(password):
            raise InvalidInputError("Username and password required")

        # Hash outside the lock; the work factor is deliberately slow.
        user = User(id=0, username=username)
        user.set_password(password, self._hash_method)

        with self._lock:
            if username in self._users:
                logger.warning("Registration rejected: username %r already exists", username)
                raise DuplicateUsernameError()

            user.id = self._next_id
            self._users[username] = user
            self._next_id += 1

        logger.info("Registered user %s (id=%s)", username, user.id)
        return replace(user)

    def verify_credentials(self, username: str, password: str) -> User:
        """
        Return the user whose credentials match.

        Raises:
            InvalidCredentialsError: Unknown username or wrong password;
                the two cases are indistinguishable to the caller.
        """
        if not isinstance(username, str) or not isinstance(password, str):
            raise InvalidCredentialsError()

        with self._lock:
            user = self._users.get(username)
            user = replace(user) if user is not None else None

        if user is None:
            # Burn the same hashing cost as a real comparison.
            User(id=0, username=username, password_hash=self._dummy_hash).check_password(password)
            raise InvalidCredentialsError()
        if not user.check_password(password):
            raise InvalidCredentialsError()
        return user

    def get(self, user_id: int) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.id == user_id:
                    return replace(user)
        return None
