import logging
import re

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.config import settings


logger = logging.getLogger("db")


def mask_database_url(url: str) -> str:
    return re.sub(r":([^:@/]+)@", ":***@", url)


logger.info("USING DATABASE_URL = %s", mask_database_url(settings.DATABASE_URL))

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)


SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
