# cartshop/models/user.py
# Модель пользователя: username, email, password_hash, role.
from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from cartshop.db.base import Base
import enum


class RoleEnum(str, enum.Enum):
    user = "USER"
    admin = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=RoleEnum.user.value)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
