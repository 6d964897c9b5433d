from fastapi import Depends, Request
from sqlmodel import Session

from .admin_session import AdminSessionManager
from .client_token import ClientTokenService
from .stores import CredentialStore, UserDirectory
from ..core.database import get_session


def get_user_directory(request: Request, session: Session = Depends(get_session)) -> UserDirectory:
    return UserDirectory(session, id_generator=request.app.state.id_generator)


def get_admin_sessions(request: Request, session: Session = Depends(get_session)) -> AdminSessionManager:
    state = request.app.state
    return AdminSessionManager(
        CredentialStore(session),
        secret=state.settings.JWT_SECRET,
        salt=state.settings.ADMIN_SALT,
        lifetime_hours=state.settings.ADMIN_TOKEN_EXPIRES_HOURS,
        clock=state.clock,
        id_generator=state.id_generator,
    )


def get_client_tokens(
    request: Request,
    directory: UserDirectory = Depends(get_user_directory),
) -> ClientTokenService:
    state = request.app.state
    return ClientTokenService(
        directory,
        secret=state.settings.JWT_SECRET,
        lifetime_hours=state.settings.CLIENT_TOKEN_EXPIRES_HOURS,
        clock=state.clock,
    )
