import hashlib
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from salestrack.auth.stores import CredentialStore, UserDirectory
from salestrack.core.database import build_engine, create_db_and_tables
from salestrack.core.settings import load_settings

SECRET = "test-signing-secret"
SALT = "NACL"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "secret123"

START = datetime(2026, 10, 19, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_settings(**overrides):
    values = {
        "JWT_SECRET": SECRET,
        "ADMIN_SALT": SALT,
        "CLIENT_TOKEN_EXPIRES_HOURS": 24,
        "DATABASE_URL": "sqlite://",
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return load_settings(_env_file=None, **values)


def make_engine():
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    return engine


def seed_admin(session: Session, username: str = ADMIN_USERNAME, password: str = ADMIN_PASSWORD):
    # Hash computed independently of the application code on purpose
    pwd_hash = hashlib.sha256((password + SALT).encode("utf-8")).hexdigest()
    return CredentialStore(session).create_admin(username, pwd_hash)


def seed_staff(session: Session):
    directory = UserDirectory(session)
    directory.add_store("S1", "旗舰店")
    directory.add_store("S2", "东区店")
    directory.add_store("S3", "西区店")
    directory.add_staff("李雷", 1, ["S1", "S2"], user_id="T1")
    directory.add_staff("韩梅梅", 2, ["S1"], user_id="T2")
    directory.add_staff("Lucy", 2, ["S3"], user_id="T3")
    return directory
