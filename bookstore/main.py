# bookstore/main.py
from contextlib import asynccontextmanager

import uvicorn

from bookstore.api import create_app
from bookstore.data.database import Base, engine
from bookstore.data import models  # noqa: F401  registers every table in Base.metadata
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


def init_db(bind=engine):
    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=bind)


@asynccontextmanager
async def lifespan(app):
    init_db()
    yield


app = create_app(lifespan=lifespan)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
