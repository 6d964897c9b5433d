from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


# ==========================================
# SQLModel (Database Entity)
# ==========================================
class Admin(SQLModel, table=True):
    __tablename__ = "admins"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True, nullable=False)
    pwd_hash: str = Field(nullable=False)
    token: str | None = Field(default=None, index=True, nullable=True)  # Live session token
    token_expires: datetime | None = Field(default=None, nullable=True, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), sa_type=DateTime(timezone=True)
    )


# ==========================================
# Pydantic Models (DTOs)
# ==========================================

# Properties to receive via API on login
class AdminLoginRequest(SQLModel):
    username: str
    password: str

# Properties to return via API on login
class AdminLoginResponse(SQLModel):
    token: str
    expiresIn: int  # Milliseconds


class AdminIdentity(SQLModel):
    id: int
    username: str
    role: str = "admin"
