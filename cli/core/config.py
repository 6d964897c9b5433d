# cli/core/config.py
from pathlib import Path
import os

# Backend base URL
BASE_URL = os.environ.get("SALESTRACK_URL", "http://localhost:8000")

# Local folder for CLI state (tokens)
APP_DIR = Path.home() / ".salestrack"

# Admin session token
SESSION_FILE = APP_DIR / "session.json"
# Staff (client) token
CLIENT_TOKEN_FILE = APP_DIR / "client_token.json"

APP_DIR.mkdir(parents=True, exist_ok=True)
