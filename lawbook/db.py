# lawbook/db.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from lawbook import config

engine_kwargs = {}
if config.DATABASE_URL.startswith("sqlite"):
    # SQLite connections are shared across the request threadpool
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if config.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(config.DATABASE_URL, **engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    # Make sure every model is registered on Base.metadata
    import lawbook.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
