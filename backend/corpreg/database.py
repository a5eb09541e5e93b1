from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from corpreg.config import settings

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection"""
    if settings.database_url.startswith("sqlite"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db():
    """Create tables if they do not exist yet (no migrations, no schema versioning)"""
    import corpreg.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency that yields a session and always closes it"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
