import logging

from sqlalchemy.engine import Engine
from sqlmodel import Session

from .settings import Settings
from ..auth.admin_session import get_password_hash
from ..auth.stores import CredentialStore

logger = logging.getLogger("salestrack.init_db")


def init_db(engine: Engine, settings: Settings):
    if not (settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD):
        return

    with Session(engine) as session:
        store = CredentialStore(session)
        if store.find_admin_by_username(settings.ADMIN_USERNAME):
            logger.info("Admin user already exists.")
            return

        logger.info("Creating initial admin user: %s", settings.ADMIN_USERNAME)
        store.create_admin(
            settings.ADMIN_USERNAME,
            get_password_hash(settings.ADMIN_PASSWORD, settings.ADMIN_SALT),
        )
