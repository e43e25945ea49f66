from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import select
from starlette.middleware.sessions import SessionMiddleware

from yzdice import models as _models  # noqa: F401 - registers models with Base.metadata
from yzdice.config import settings
from yzdice.database import AsyncSessionLocal, Base, engine
from yzdice.models import User
from yzdice.routers import auth, chat, rolls

logger = logging.getLogger(__name__)

# (display name, is game master)
_DEV_USERS = [("Alice", False), ("Bob", False), ("Gamemaster", True)]


async def _seed_dev_users() -> None:
    """Insert named dev users if they don't already exist."""
    async with AsyncSessionLocal() as session:
        for name, is_gm in _DEV_USERS:
            result = await session.execute(select(User).where(User.display_name == name))
            if result.scalar_one_or_none() is None:
                session.add(User(display_name=name, is_gm=is_gm))
        await session.commit()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    if settings.debug:
        logging.basicConfig(level=logging.DEBUG)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if settings.environment != "production":
        await _seed_dev_users()
    logger.info("yzdice started (%s)", settings.environment)
    yield


app = FastAPI(title="yzdice", lifespan=lifespan)

app.add_middleware(SessionMiddleware, secret_key=settings.session_secret_key)

app.include_router(auth.router)
app.include_router(rolls.router)
app.include_router(chat.router)
