from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from app.core.config import DATABASE_URL, SQL_ECHO


def _engine_kwargs(url: str) -> dict:
    kwargs: dict = {"echo": SQL_ECHO}  # SQL_ECHO=true imprime las queries
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # SQLite en memoria: una sola conexión compartida
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))


def create_db_and_tables():
    import app.models  # noqa: F401  registra las tablas en el metadata
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
