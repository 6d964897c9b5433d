"""
Authorization gate: the one seam every protected route passes through.

``authorize`` is pure apart from the verify call it delegates to. It either
returns the verified identity or raises an ``AuthError`` (the rejection).
"""
import logging
from dataclasses import dataclass
from typing import Annotated, Optional, Union

from fastapi import Depends, Header

from .admin_session import AdminSessionManager
from .client_token import ClientTokenService
from .errors import AuthError, Forbidden, Unauthenticated
from .service import get_admin_sessions, get_client_tokens
from ..models.Admin import AdminIdentity
from ..models.Staff import ClientIdentity, StaffRole
from ..models.Token import Rejection

logger = logging.getLogger("salestrack.auth.gate")

Identity = Union[AdminIdentity, ClientIdentity]


@dataclass(frozen=True)
class AdminPolicy:
    pass


@dataclass(frozen=True)
class ClientPolicy:
    role: Optional[StaffRole] = None


Policy = Union[AdminPolicy, ClientPolicy]


def parse_bearer(authorization: Optional[str]) -> str:
    if not authorization:
        raise Unauthenticated()

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme != "Bearer" or not token or " " in token:
        raise Unauthenticated()
    return token


def authorize(
    authorization: Optional[str],
    policy: Policy,
    admin_sessions: Optional[AdminSessionManager] = None,
    client_tokens: Optional[ClientTokenService] = None,
) -> Identity:
    token = parse_bearer(authorization)

    if isinstance(policy, AdminPolicy):
        return admin_sessions.verify(token)

    identity = client_tokens.verify(token)
    if policy.role is not None and identity.role != policy.role:
        raise Forbidden(f"Requires role '{policy.role.value}'")
    return identity


def to_rejection(exc: AuthError) -> tuple[int, Rejection, dict]:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else {}
    return exc.status_code, Rejection(message=exc.message), headers


class Authorize:
    """FastAPI dependency applying a policy to the request's Authorization header."""

    def __init__(self, policy: Policy):
        self.policy = policy

    def __call__(
        self,
        authorization: Annotated[Optional[str], Header()] = None,
        admin_sessions: AdminSessionManager = Depends(get_admin_sessions),
        client_tokens: ClientTokenService = Depends(get_client_tokens),
    ) -> Identity:
        try:
            return authorize(authorization, self.policy, admin_sessions, client_tokens)
        except AuthError as e:
            logger.debug("Rejected request: %s (%s)", type(e).__name__, e.status_code)
            raise


require_admin = Authorize(AdminPolicy())
require_client = Authorize(ClientPolicy())
require_manager = Authorize(ClientPolicy(role=StaffRole.MANAGER))
