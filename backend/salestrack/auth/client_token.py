import logging
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from . import codec
from .admin_session import Clock, utcnow
from .errors import BadSignature, Expired, InvalidToken, MalformedToken, NotFound, UnsupportedAlgorithm
from .stores import UserDirectory
from ..core.settings import ConfigurationError
from ..models.Staff import ClientIdentity, StaffRole
from ..models.Token import ClientToken

logger = logging.getLogger("salestrack.auth.client")


def _unix_seconds(moment: datetime) -> int:
    return int(moment.timestamp())


class ClientTokenService:
    """
    Stateless staff tokens. Nothing is stored server-side, so a token stays valid until exp.
    """

    def __init__(
        self,
        directory: Optional[UserDirectory],
        secret: str,
        lifetime_hours: Optional[int],
        clock: Optional[Clock] = None,
    ):
        if not isinstance(lifetime_hours, int) or isinstance(lifetime_hours, bool) or lifetime_hours <= 0:
            raise ConfigurationError("CLIENT_TOKEN_EXPIRES_HOURS must be a positive integer")
        if not secret:
            raise ConfigurationError("JWT_SECRET must be set")

        self.directory = directory
        self.secret = secret
        self.lifetime_seconds = lifetime_hours * 3600
        self.clock = clock or utcnow

    def issue(self, tracking_id: str) -> ClientToken:
        entry = self.directory.find_user_by_tracking_id(tracking_id) if tracking_id else None
        # Staff without a store membership cannot sign in
        if entry is None or not entry.store_ids:
            raise NotFound()

        user = ClientIdentity(
            id=entry.id,
            name=entry.name,
            role=StaffRole.from_code(entry.role_code),
            store_ids=entry.store_ids,
            store_names=dict(zip(entry.store_ids, entry.store_names)),
        )
        iat = _unix_seconds(self.clock())
        payload = {
            "user": user.to_claim(),
            "iat": iat,
            "exp": iat + self.lifetime_seconds,
        }
        logger.info("Issued client token for user %s", entry.id)
        return ClientToken(token=codec.encode_token(payload, self.secret))

    def verify(self, token: str) -> ClientIdentity:
        # Order: structure, algorithm, expiry, signature
        try:
            parsed = codec.parse_token(token)
        except codec.DecodeError as e:
            raise MalformedToken() from e

        if parsed.header.get("alg") != codec.ALGORITHM:
            raise UnsupportedAlgorithm()

        exp = parsed.payload.get("exp")
        if exp is None:
            raise Expired()
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise MalformedToken()
        if exp <= _unix_seconds(self.clock()):
            raise Expired()

        if not codec.verify(parsed.signing_input, parsed.signature, self.secret):
            raise BadSignature()

        try:
            return ClientIdentity.model_validate(parsed.payload.get("user"))
        except ValidationError as e:
            raise InvalidToken() from e
