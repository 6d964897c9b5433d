import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from .auth.admin_session import Clock, utcnow
from .auth.errors import AuthError
from .auth.gate import to_rejection
from .auth.router import router as auth_router
from .core.database import build_engine, create_db_and_tables
from .core.init_db import init_db
from .core.settings import Settings, get_settings
from .core.snowflake import IdGenerator
from .sales.router import router as sales_router


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    # Raises ConfigurationError before anything is served
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_db_and_tables(app.state.engine)
        init_db(app.state.engine, settings)
        yield

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine or build_engine(settings.DATABASE_URL)
    app.state.clock = clock or utcnow
    app.state.id_generator = IdGenerator()

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        status_code, rejection, headers = to_rejection(exc)
        return JSONResponse(status_code=status_code, content=rejection.model_dump(), headers=headers)

    app.include_router(auth_router)
    app.include_router(sales_router)

    @app.get("/")
    def read_root():
        return {"message": f"Welcome to {settings.PROJECT_NAME}"}

    return app
