from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from booking.core import config


def _engine_options(database_url: str) -> dict:
    options = {'echo': config.DATABASE_ECHO}
    if database_url.startswith('sqlite'):
        options['connect_args'] = {'check_same_thread': False}
    else:
        options['pool_pre_ping'] = True
    return options


engine = create_engine(config.DATABASE_URL, **_engine_options(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
