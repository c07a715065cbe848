# bookstore/data/models/user.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from bookstore.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(100), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False)  # admin, user
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    details = relationship(
        "UserDetailsModel",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )


class UserDetailsModel(Base):
    __tablename__ = "user_details"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    full_name = Column(String(200), nullable=False)
    phone_number = Column(String(50), nullable=False)

    user = relationship("UserModel", back_populates="details")


class AdminBootstrapModel(Base):
    """
    Single-row claim on the admin role. The primary key lets only one
    registration ever insert it, however many race for it.
    """
    __tablename__ = "admin_bootstrap"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
