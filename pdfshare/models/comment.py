"""
Comment model with a single level of replies.
"""
from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from pdfshare.db.base import Base, UTCDateTime, utcnow


class Comment(Base):
    """Comment attached to a page of a document."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    page_number = Column(Integer, nullable=False)
    commenter_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    commenter_name = Column(String, nullable=True)  # self-reported name for anonymous commenters
    user_type = Column(String, nullable=False, default="owner")  # owner, invited
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime, nullable=True)
    parent_comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)

    # Relationships
    document = relationship("Document", back_populates="comments")
    commenter = relationship("User", back_populates="comments")
    parent = relationship("Comment", remote_side=[id], back_populates="replies")
    replies = relationship(
        "Comment",
        back_populates="parent",
        order_by="[Comment.created_at, Comment.id]",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
