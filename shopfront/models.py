from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime
from typing import Optional, List
import uuid


"""
This file contains the models for the database tables.

We have 3 tables:
    - User
    - Category
    - UserInterest (link table between User and Category)
"""


def new_id() -> str:
    return uuid.uuid4().hex


class UserInterest(SQLModel, table=True):
    __tablename__ = "user_interest"

    user_id: str = Field(foreign_key="user.id", primary_key=True, ondelete="CASCADE")
    category_id: str = Field(foreign_key="category.id", primary_key=True, ondelete="CASCADE")


class Category(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(unique=True, index=True)

    users: List["User"] = Relationship(back_populates="interests", link_model=UserInterest)


class User(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    # Accounts created outside signup may not have a password
    password_hash: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    interests: List[Category] = Relationship(back_populates="users", link_model=UserInterest)
