import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from core.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_uri: str) -> Engine:
    connect_args = {}
    if database_uri.startswith("sqlite"):
        # the API serves requests from a thread pool
        connect_args["check_same_thread"] = False
    return create_engine(database_uri, connect_args=connect_args)


engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)


# make sure all SQLModel models are imported (models) before initializing DB
# otherwise, SQLModel might not create every table
def init_db(db_engine: Engine = engine) -> None:
    import models  # noqa: F401

    SQLModel.metadata.create_all(db_engine)
    logger.info("Database tables ready at %s", db_engine.url)
