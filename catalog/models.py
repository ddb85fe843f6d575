from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.categories import CategoryList
from catalog.database import Base


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships: lazy="noload" enforces explicit eager loading in services
    articles: Mapped[List["Article"]] = relationship(
        "Article", back_populates="user", lazy="noload"
    )


# ---------------------------------------------------------------------------
# ArticleStatistics
# ---------------------------------------------------------------------------
class ArticleStatistics(Base):
    __tablename__ = "article_statistics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    view: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    enjoy: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    stored: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    article: Mapped[Optional["Article"]] = relationship(
        "Article", back_populates="statistics", lazy="noload", uselist=False
    )


# ---------------------------------------------------------------------------
# Article
# ---------------------------------------------------------------------------
class Article(Base):
    __tablename__ = "articles"

    __table_args__ = (
        # Default listing: visible articles, newest first
        Index("ix_articles_visibility_created_at", "is_deleted", "is_published", "created_at"),
        Index("ix_articles_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    subtitle: Mapped[str] = mapped_column(String(300), default="", nullable=False)
    author: Mapped[str] = mapped_column(String(150), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[List[str]] = mapped_column(CategoryList, nullable=False)
    thumbnail: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_original: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Stored pre-formatted with settings.DATE_FORMAT
    created_at: Mapped[str] = mapped_column(String(32), nullable=False)
    updated_at: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    # Foreign keys
    statistics_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("article_statistics.id"), unique=True, nullable=False
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships: all lazy="noload"; use selectinload in services
    statistics: Mapped["ArticleStatistics"] = relationship(
        "ArticleStatistics", back_populates="article", lazy="noload"
    )
    user: Mapped[Optional["User"]] = relationship(
        "User", back_populates="articles", lazy="noload"
    )
