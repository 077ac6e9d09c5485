from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import config
import models_sqlalchemy as models
from logger import get_logger

logger = get_logger(__name__)

DATABASE_URL = config.DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """Create any missing tables."""
    bind = bind or engine
    models.Base.metadata.create_all(bind=bind)
    logger.info(f"Database schema ready at {bind.url.render_as_string(hide_password=True)}")


# Dependency to get a DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
