from pydantic import BaseModel
from sqlmodel import SQLModel

TOKEN_HEADER = {"alg": "HS256", "typ": "JWT"}


class ClientAuthRequest(SQLModel):
    user_id: str  # Tracking id

class ClientToken(SQLModel):
    token: str


class Rejection(BaseModel):
    message: str
