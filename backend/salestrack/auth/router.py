from fastapi import APIRouter, Depends

from .admin_session import AdminSessionManager
from .client_token import ClientTokenService
from .gate import require_admin, require_client
from .service import get_admin_sessions, get_client_tokens
from ..models.Admin import AdminIdentity, AdminLoginRequest, AdminLoginResponse
from ..models.Staff import ClientIdentity
from ..models.Token import ClientAuthRequest, ClientToken

router = APIRouter(prefix="/api/v1", tags=["auth"])


@router.post("/admin/login", response_model=AdminLoginResponse)
async def admin_login(
    login_data: AdminLoginRequest,
    admin_sessions: AdminSessionManager = Depends(get_admin_sessions),
):
    """
    Login with admin username and password to get a session token.
    """
    return admin_sessions.login(login_data.username, login_data.password)


@router.get("/admin/verify")
async def admin_verify(current_admin: AdminIdentity = Depends(require_admin)):
    """
    Check that the admin session token is still live.
    """
    return {"status": "success", "message": "Token is valid"}


@router.post("/admin/logout")
async def admin_logout(
    current_admin: AdminIdentity = Depends(require_admin),
    admin_sessions: AdminSessionManager = Depends(get_admin_sessions),
):
    """
    Revoke the current admin session.
    """
    admin_sessions.revoke(current_admin.id)
    return {"message": "Logged out successfully"}


@router.post("/auth", response_model=ClientToken)
async def client_auth(
    auth_data: ClientAuthRequest,
    client_tokens: ClientTokenService = Depends(get_client_tokens),
):
    """
    Exchange a staff tracking id for a signed client token.
    """
    return client_tokens.issue(auth_data.user_id)


@router.get("/auth/me")
async def client_me(current_user: ClientIdentity = Depends(require_client)):
    """
    Return the identity embedded in the caller's client token.
    """
    return current_user.to_claim()
