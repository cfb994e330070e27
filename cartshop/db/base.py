# cartshop/db/base.py
# Общая declarative база для SQLAlchemy.
# Модуль не импортирует модели, чтобы избежать циклических импортов.
# Модели импортируют Base отсюда.

from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

# Стабильные имена индексов и ключей, чтобы alembic autogenerate не плодил дубликаты
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))
