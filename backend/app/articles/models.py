# backend/app/articles/models.py
from enum import Enum as PyEnum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, Boolean,
    Enum as SQLEnum, Index, CheckConstraint, false
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base

class ArticleStatus(str, PyEnum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"

class Article(Base):
    __tablename__ = "articles"
    __table_args__ = (
        Index("ix_articles_status_created", "status", "created_at"),
        Index("ix_articles_views", "views"),
        CheckConstraint("views >= 0", name="ck_articles_views_non_negative"),
        CheckConstraint(
            "decline_reason IS NULL OR status = 'declined'",
            name="ck_articles_decline_reason_status",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")
    image = Column(String(1024))

    author_name = Column(String(100))
    author_email = Column(String(255), nullable=False, index=True)
    author_photo = Column(String(1024))

    # publisher / tags 는 {value, label} 쌍. publisher 는 비정규화된 참조입니다.
    publisher_value = Column(String(255), index=True)
    publisher_label = Column(String(255), index=True)

    status = Column(
        SQLEnum(ArticleStatus, name="article_status", values_callable=lambda e: [m.value for m in e]),
        default=ArticleStatus.PENDING,
        nullable=False,
    )
    decline_reason = Column(Text)
    views = Column(Integer, default=0, server_default="0", nullable=False)
    is_premium = Column(Boolean, default=False, server_default=false(), nullable=False)
    is_exclusive = Column(Boolean, default=False, server_default=false(), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    tags = relationship(
        "ArticleTag",
        back_populates="article",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ArticleTag.id",
    )

    @property
    def publisher(self) -> dict | None:
        if self.publisher_value is None and self.publisher_label is None:
            return None
        return {"value": self.publisher_value, "label": self.publisher_label}

    def __repr__(self) -> str:
        return f"Article(id={self.id}, title={self.title!r}, status={self.status!r}, views={self.views})"
    def __str__(self) -> str:
        return f"Article#{self.id} {self.title}"

class ArticleTag(Base):
    __tablename__ = "article_tags"
    __table_args__ = (
        Index("ix_article_tags_value", "value"),
    )

    id = Column(Integer, primary_key=True, index=True)
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True)
    value = Column(String(100), nullable=False)
    label = Column(String(100), nullable=False)

    article = relationship("Article", back_populates="tags")

    def __repr__(self) -> str:
        return f"ArticleTag(article_id={self.article_id}, value={self.value!r})"
