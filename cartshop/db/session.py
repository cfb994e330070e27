# cartshop/db/session.py
# Инициализация SQLAlchemy engine и фабрики сессий.
# Поддерживает как Postgres, так и SQLite (для тестов/локального использования).

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from cartshop.core.config import settings

DATABASE_URL = settings.DATABASE_URL


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite по умолчанию не соблюдает ON DELETE CASCADE/RESTRICT
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str, **kwargs):
    """Создаёт engine; для sqlite добавляет connect_args и включает внешние ключи."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # pool_pre_ping полезен для долгоживущих соединений с Postgres
    return create_engine(url, pool_pre_ping=True, **kwargs)


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
