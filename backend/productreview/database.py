from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import datetime
import os

# Use DATABASE_URL env var. Default to sqlite file in the working directory for dev.
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///./productreview.db')


def make_engine(url):
    """Create an engine; sqlite connections are shared across threadpool workers
    and wait on a busy database instead of failing immediately."""
    connect_args = {}
    if url.startswith('sqlite'):
        connect_args = {
            "check_same_thread": False,
            "timeout": float(os.getenv('DB_BUSY_TIMEOUT', '30')),
        }
    # pool_pre_ping for reliability with some DB providers
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def utcnow():
    # naive UTC, matching what DateTime columns store
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
