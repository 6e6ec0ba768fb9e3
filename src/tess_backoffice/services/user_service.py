"""User accounts: seeding, authentication, sessions and registration."""

from __future__ import annotations

import logging
from datetime import timedelta
from uuid import uuid4

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from tess_backoffice.clock import Clock, SystemClock
from tess_backoffice.config import Settings, get_settings
from tess_backoffice.models import Employee, PaymentMethod, Role, User
from tess_backoffice.money import ZERO
from tess_backoffice.services.errors import RecordNotFoundError, ValidationFailedError
from tess_backoffice.store import Collection, RecordStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
TOKEN_ALGORITHM = "HS256"

# (username, display name) of the accounts created on first start
DEFAULT_ADMINS = [
    ("admin", "Administrator"),
    ("admin1", "Co-Admin"),
]


class UserService:
    """Service for login accounts.

    Passwords are only ever stored as salted PBKDF2 hashes. A successful login
    yields a signed access token; the token, not a user id, identifies the
    caller afterwards.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Clock | None = None,
        settings: Settings | None = None,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.settings = settings or get_settings()

    def list_users(self) -> list[User]:
        return self.store.read_all(Collection.USERS)

    def get_user(self, user_id: str) -> User:
        for user in self.list_users():
            if user.id == user_id:
                return user
        raise RecordNotFoundError("User", user_id)

    def find_by_username(self, username: str) -> User | None:
        for user in self.list_users():
            if user.username == username:
                return user
        return None

    def seed_defaults(self) -> list[User]:
        """Create the default admin accounts when no users exist yet."""
        with self.store.transaction():
            snapshot = self.store.load(Collection.USERS)
            if snapshot.items:
                return []
            now = self.clock.now()
            seeded = [
                User(
                    id=uuid4().hex,
                    username=username,
                    password_hash=self._hash(self.settings.default_admin_password or username),
                    role=Role.ADMIN,
                    name=name,
                    created_at=now,
                )
                for username, name in DEFAULT_ADMINS
            ]
            self.store.save(Collection.USERS, seeded, expected_version=snapshot.version)

        logger.info("Seeded %d default admin accounts", len(seeded))
        return seeded

    def authenticate(self, username: str, password: str, role: Role | str) -> User | None:
        """Return the user when the credentials and the requested portal match."""
        user = self.find_by_username(username)
        if user is None or not check_password_hash(user.password_hash, password):
            logger.info("Failed login for %s", username)
            return None
        if user.role != role:
            logger.warning(
                "User %s exists but has role %s, expected %s",
                username,
                user.role.value,
                getattr(role, "value", role),
            )
            return None
        logger.info("User %s logged in as %s", username, user.role.value)
        return user

    def issue_token(self, user: User) -> str:
        """Sign an access token for a logged-in user."""
        now = self.clock.now()
        payload = {
            "sub": user.id,
            "role": user.role.value,
            "iat": now,
            "exp": now + timedelta(minutes=self.settings.token_expire_minutes),
        }
        return jwt.encode(payload, self.settings.secret_key, algorithm=TOKEN_ALGORITHM)

    def resolve_token(self, token: str) -> User | None:
        """Return the user an access token was issued to.

        None for forged, malformed or expired tokens and for deleted users.
        Expiry is checked against the service clock.
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[TOKEN_ALGORITHM],
                options={"require": ["sub", "exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected access token: %s", exc)
            return None
        if payload["exp"] <= self.clock.now().timestamp():
            logger.info("Access token for %s has expired", payload["sub"])
            return None
        for user in self.list_users():
            if user.id == payload["sub"]:
                return user
        logger.warning("Access token refers to unknown user %s", payload["sub"])
        return None

    def sign_up_employee(self, username: str, password: str, confirm_password: str) -> User:
        """Register an employee account together with its employee record."""
        username = (username or "").strip()
        self._validate_new_account(username, password, confirm_password)

        now = self.clock.now()
        user = User(
            id=uuid4().hex,
            username=username,
            password_hash=self._hash(password),
            role=Role.EMPLOYEE,
            name=username,
            created_at=now,
        )
        employee = Employee(
            id=user.id,
            name=username,
            username=username,
            position="Staff",
            department="Operations",
            status="active",
            base_salary=ZERO,
            payment_method=PaymentMethod.CASH,
            hire_date=now,
            created_at=now,
            updated_at=now,
        )

        with self.store.transaction():
            self._append_user(user)
            snapshot = self.store.load(Collection.EMPLOYEES)
            self.store.save(
                Collection.EMPLOYEES,
                [*snapshot.items, employee],
                expected_version=snapshot.version,
            )

        logger.info("Registered employee account %s", username)
        return user

    def create_admin(
        self, username: str, password: str, confirm_password: str, name: str
    ) -> User:
        """Create another admin account."""
        username = (username or "").strip()
        name = (name or "").strip()
        self._validate_new_account(username, password, confirm_password, name=name)

        user = User(
            id=uuid4().hex,
            username=username,
            password_hash=self._hash(password),
            role=Role.ADMIN,
            name=name,
            created_at=self.clock.now(),
        )
        with self.store.transaction():
            self._append_user(user)

        logger.info("Created admin account %s", username)
        return user

    def _append_user(self, user: User) -> None:
        snapshot = self.store.load(Collection.USERS)
        users: list[User] = snapshot.items
        if any(u.username == user.username for u in users):
            raise ValidationFailedError("Username already exists")
        self.store.save(Collection.USERS, [*users, user], expected_version=snapshot.version)

    def _validate_new_account(
        self,
        username: str,
        password: str,
        confirm_password: str,
        name: str | None = None,
    ) -> None:
        if not username or not password or not confirm_password or name == "":
            raise ValidationFailedError("All fields are required")
        if password != confirm_password:
            raise ValidationFailedError("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailedError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

    def _hash(self, password: str) -> str:
        return generate_password_hash(
            password, method=f"pbkdf2:sha256:{self.settings.password_hash_iterations}"
        )
