import requests
from typing import Optional, List

from .config import BASE_URL

TIMEOUT = 5


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def api_admin_login(username: str, password: str) -> Optional[str]:
    """
    Logs in to the backend as admin and returns the session token.
    """
    url = f"{BASE_URL}/api/v1/admin/login"
    data = {"username": username, "password": password}

    try:
        resp = requests.post(url, json=data, timeout=TIMEOUT)
        if resp.status_code != 200:
            return None
        return resp.json().get("token")
    except requests.RequestException:
        return None


def api_admin_verify(token: str) -> bool:
    url = f"{BASE_URL}/api/v1/admin/verify"

    try:
        resp = requests.get(url, headers=_auth_headers(token), timeout=TIMEOUT)
        return resp.status_code == 200
    except requests.RequestException:
        return False


def api_admin_logout(token: str) -> bool:
    """
    Revokes the admin session on the backend.
    """
    url = f"{BASE_URL}/api/v1/admin/logout"

    try:
        resp = requests.post(url, headers=_auth_headers(token), timeout=TIMEOUT)
        return resp.status_code == 200
    except requests.RequestException:
        return False


def api_client_auth(tracking_id: str) -> Optional[str]:
    """
    Exchanges a staff tracking id for a client token.
    """
    url = f"{BASE_URL}/api/v1/auth"

    try:
        resp = requests.post(url, json={"user_id": tracking_id}, timeout=TIMEOUT)
        if resp.status_code != 200:
            return None
        return resp.json().get("token")
    except requests.RequestException:
        return None


def api_client_stores(token: str) -> Optional[List[dict]]:
    url = f"{BASE_URL}/api/v1/sales/stores"

    try:
        resp = requests.get(url, headers=_auth_headers(token), timeout=TIMEOUT)
        if resp.status_code != 200:
            return None
        return resp.json()
    except requests.RequestException:
        return None
