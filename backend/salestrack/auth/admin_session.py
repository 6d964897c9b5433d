import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from passlib.context import CryptContext

from . import codec
from .errors import InvalidCredentials, InvalidToken, Unauthenticated
from .stores import CredentialStore
from ..core.snowflake import IdGenerator
from ..models.Admin import AdminIdentity, AdminLoginResponse

logger = logging.getLogger("salestrack.auth.admin")

# Plain SHA-256 over password + salt, kept for compatibility with existing rows.
# Weak: no per-user salt and no work factor. Upgrading to a slow KDF needs a data migration.
pwd_context = CryptContext(schemes=["hex_sha256"])

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_password_hash(password: str, salt: str) -> str:
    return pwd_context.hash(password + salt)


class AdminSessionManager:
    """
    Stateful admin sessions: the token row in the credential store is the authority.
    """

    def __init__(
        self,
        store: CredentialStore,
        secret: str,
        salt: str,
        lifetime_hours: int = 24,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
    ):
        self.store = store
        self.secret = secret
        self.salt = salt
        self.lifetime = timedelta(hours=lifetime_hours)
        self.clock = clock or utcnow
        self.id_generator = id_generator or IdGenerator()

    def login(self, username: str, password: str) -> AdminLoginResponse:
        if not username or not password:
            raise InvalidCredentials()

        admin = self.store.find_admin_by_username_and_hash(username, get_password_hash(password, self.salt))
        if admin is None:
            logger.warning("Admin login failed for username=%r", username)
            raise InvalidCredentials()

        payload = {
            "id": admin.id,
            "username": admin.username,
            "role": "admin",
            # Distinct per login, so a new login always yields a new token
            "jti": self.id_generator.next_id(),
        }
        token = codec.encode_token(payload, self.secret)

        # Overwrites any previous session of this admin (last write wins)
        self.store.update_admin_token(admin.id, token, self.clock() + self.lifetime)
        logger.info("Admin %s logged in", admin.id)

        return AdminLoginResponse(token=token, expiresIn=int(self.lifetime.total_seconds() * 1000))

    def verify(self, token: str) -> AdminIdentity:
        # Row membership is the check; the signature is deliberately not recomputed here
        if not token:
            raise Unauthenticated()

        admin = self.store.find_admin_by_live_token(token, self.clock())
        if admin is None:
            raise InvalidToken()

        return AdminIdentity(id=admin.id, username=admin.username)

    def revoke(self, admin_id: int) -> None:
        self.store.clear_admin_token(admin_id)
        logger.info("Admin %s session revoked", admin_id)
