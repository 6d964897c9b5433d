from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

MANAGER_ROLE_CODE = 1


class StaffRole(str, Enum):
    MANAGER = "manager"
    SALESPERSON = "salesperson"

    @classmethod
    def from_code(cls, role_code) -> "StaffRole":
        return cls.MANAGER if role_code == MANAGER_ROLE_CODE else cls.SALESPERSON


# ==========================================
# SQLModel (Database Entities)
# ==========================================
class Store(SQLModel, table=True):
    __tablename__ = "stores"

    store_id: str = Field(primary_key=True)
    store_name: str = Field(unique=True, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), sa_type=DateTime(timezone=True)
    )


class StaffUser(SQLModel, table=True):
    __tablename__ = "users"

    user_id: str = Field(primary_key=True)  # Tracking id handed to the staff member
    user_name: str = Field(nullable=False)
    role_id: int = Field(default=2)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), sa_type=DateTime(timezone=True)
    )


class UserStore(SQLModel, table=True):
    __tablename__ = "user_stores"

    user_id: str = Field(foreign_key="users.user_id", primary_key=True)
    store_id: str = Field(foreign_key="stores.store_id", primary_key=True)


# ==========================================
# Pydantic Models (DTOs)
# ==========================================
class DirectoryEntry(BaseModel):
    id: str
    name: str
    role_code: int | None = None
    store_ids: list[str] = []
    store_names: list[str] = []


class StoreResponse(SQLModel):
    store_id: str
    store_name: str


class StaffResponse(SQLModel):
    user_id: str
    user_name: str
    role: StaffRole
    store_ids: list[str]


class ClientIdentity(BaseModel):
    """The `user` claim of a client token."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    role: StaffRole
    store_ids: list[str] = PydanticField(default_factory=list, alias="storeIds")
    store_names: dict[str, str] = PydanticField(default_factory=dict, alias="storeNames")

    @property
    def is_manager(self) -> bool:
        return self.role == StaffRole.MANAGER

    def to_claim(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
