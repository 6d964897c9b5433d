from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlmodel import Session, select

from ..core.snowflake import IdGenerator
from ..models.Admin import Admin
from ..models.Staff import DirectoryEntry, StaffUser, Store, UserStore


def as_utc(moment: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are always written as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class CredentialStore:
    """Admin accounts: username, salted password hash and the single live session token."""

    def __init__(self, session: Session):
        self.session = session

    def create_admin(self, username: str, pwd_hash: str) -> Admin:
        admin = Admin(username=username, pwd_hash=pwd_hash)
        self.session.add(admin)
        self.session.commit()
        self.session.refresh(admin)
        return admin

    def find_admin_by_username(self, username: str) -> Optional[Admin]:
        statement = select(Admin).where(Admin.username == username)
        return self.session.exec(statement).first()

    def find_admin_by_username_and_hash(self, username: str, pwd_hash: str) -> Optional[Admin]:
        statement = select(Admin).where(Admin.username == username, Admin.pwd_hash == pwd_hash)
        return self.session.exec(statement).first()

    def update_admin_token(self, admin_id: int, token: str, expires_at: datetime) -> None:
        admin = self.session.get(Admin, admin_id)
        if admin is None:
            raise LookupError(f"Admin {admin_id} does not exist")
        admin.token = token
        admin.token_expires = as_utc(expires_at)
        self.session.add(admin)
        self.session.commit()

    def find_admin_by_live_token(self, token: str, now: datetime) -> Optional[Admin]:
        statement = select(Admin).where(
            Admin.token == token,
            Admin.token_expires > as_utc(now),
        )
        return self.session.exec(statement).first()

    def clear_admin_token(self, admin_id: int) -> None:
        admin = self.session.get(Admin, admin_id)
        if admin is None:
            return
        admin.token = None
        admin.token_expires = None
        self.session.add(admin)
        self.session.commit()


class UserDirectory:
    """Staff members, their role code and store memberships."""

    def __init__(self, session: Session, id_generator: Optional[IdGenerator] = None):
        self.session = session
        self.id_generator = id_generator

    def _stores_of(self, user_id: str) -> list[Store]:
        statement = (
            select(Store)
            .join(UserStore, UserStore.store_id == Store.store_id)
            .where(UserStore.user_id == user_id)
            .order_by(Store.store_id)
        )
        return list(self.session.exec(statement).all())

    def find_user_by_tracking_id(self, tracking_id: str) -> Optional[DirectoryEntry]:
        user = self.session.get(StaffUser, tracking_id)
        if user is None:
            return None

        stores = self._stores_of(user.user_id)
        return DirectoryEntry(
            id=user.user_id,
            name=user.user_name,
            role_code=user.role_id,
            store_ids=[s.store_id for s in stores],
            store_names=[s.store_name for s in stores],
        )

    def stores_for_user(self, user_id: str) -> list[Store]:
        return self._stores_of(user_id)

    def staff_for_stores(self, store_ids: Iterable[str]) -> list[tuple[StaffUser, list[str]]]:
        store_ids = list(store_ids)
        if not store_ids:
            return []

        statement = (
            select(StaffUser, UserStore.store_id)
            .join(UserStore, UserStore.user_id == StaffUser.user_id)
            .where(UserStore.store_id.in_(store_ids))
            .order_by(StaffUser.user_id, UserStore.store_id)
        )
        grouped: dict[str, tuple[StaffUser, list[str]]] = {}
        for user, store_id in self.session.exec(statement).all():
            grouped.setdefault(user.user_id, (user, []))[1].append(store_id)
        return list(grouped.values())

    def add_store(self, store_id: str, store_name: str) -> Store:
        store = Store(store_id=store_id, store_name=store_name)
        self.session.add(store)
        self.session.commit()
        self.session.refresh(store)
        return store

    def add_staff(
        self,
        name: str,
        role_code: int,
        store_ids: Iterable[str] = (),
        user_id: Optional[str] = None,
    ) -> StaffUser:
        if user_id is None:
            if self.id_generator is None:
                raise ValueError("user_id is required when no id generator is configured")
            user_id = self.id_generator.next_id()

        user = StaffUser(user_id=user_id, user_name=name, role_id=role_code)
        self.session.add(user)
        for store_id in store_ids:
            self.session.add(UserStore(user_id=user_id, store_id=store_id))
        self.session.commit()
        self.session.refresh(user)
        return user
