"""Post model."""

from datetime import date
from typing import Optional

from sqlalchemy import Text
from sqlmodel import Field
from src.core.database import BaseModel


class Post(BaseModel, table=True):
    """Post model class."""

    __tablename__ = "blog_posts"  # type: ignore
    title: str = Field(max_length=255)
    slug: str = Field(max_length=255, unique=True, index=True)
    body: str = Field(sa_type=Text)  # type: ignore
    is_published: bool = Field(default=False)
    publish_date: Optional[date] = Field(default=None)
    meta_description: Optional[str] = Field(default=None, max_length=160)
    tags: Optional[str] = Field(default=None)
    keywords: Optional[str] = Field(default=None)
