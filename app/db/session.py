# app/db/session.py

from urllib.parse import quote_plus

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def build_database_url() -> str:
    if settings.DATABASE_URL:
        return settings.DATABASE_URL

    if settings.DB_HOST:
        # URL-encode password to handle special characters like @ $ !
        encoded_password = quote_plus(settings.DB_PASSWORD or "")
        return (
            f"postgresql+psycopg2://{settings.DB_USER}:"
            f"{encoded_password}@"
            f"{settings.DB_HOST}:"
            f"{settings.DB_PORT}/"
            f"{settings.DB_NAME}"
            f"?sslmode={settings.DB_SSLMODE}"
        )

    return "sqlite:///./claims.db"


def make_engine(url: str, **kwargs):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    else:
        kwargs.setdefault("pool_pre_ping", True)

    eng = create_engine(url, connect_args=connect_args, **kwargs)

    if eng.dialect.name == "sqlite":
        # cascades on child tables rely on FK enforcement
        @event.listens_for(eng, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return eng


engine = make_engine(build_database_url())

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
