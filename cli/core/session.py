# cli/core/session.py
import json
import time
from typing import Optional

from salestrack.auth import codec

from .config import SESSION_FILE, CLIENT_TOKEN_FILE


def _save(path, key: str, token: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump({key: token}, f)


def _load(path, key: str) -> Optional[str]:
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data.get(key)
    except (OSError, ValueError):
        # An unreadable file means there is no valid session
        return None


def save_token(token: str) -> None:
    """
    Stores the admin session token in SESSION_FILE.
    """
    _save(SESSION_FILE, "token", token)


def load_token() -> Optional[str]:
    """
    Reads the admin session token. Returns None when missing or unreadable.
    """
    return _load(SESSION_FILE, "token")


def is_logged_in() -> bool:
    return load_token() is not None


def save_client_token(token: str) -> None:
    _save(CLIENT_TOKEN_FILE, "token", token)


def load_client_token() -> Optional[str]:
    return _load(CLIENT_TOKEN_FILE, "token")


def clear_token() -> None:
    """
    Deletes both local token files.
    """
    if SESSION_FILE.exists():
        SESSION_FILE.unlink()
    if CLIENT_TOKEN_FILE.exists():
        CLIENT_TOKEN_FILE.unlink()


def read_client_user(now: Optional[float] = None) -> Optional[dict]:
    """
    Decodes the stored staff token locally and returns its `user` claim.

    The signature is not checked here; the server is the authority. An expired
    or undecodable token is discarded and None is returned.
    """
    token = load_client_token()
    if not token:
        return None

    try:
        parsed = codec.parse_token(token)
    except codec.DecodeError:
        return None

    exp = parsed.payload.get("exp")
    if not isinstance(exp, (int, float)) or exp <= (time.time() if now is None else now):
        if CLIENT_TOKEN_FILE.exists():
            CLIENT_TOKEN_FILE.unlink()
        return None

    return parsed.payload.get("user")
