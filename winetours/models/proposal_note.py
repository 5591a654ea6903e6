"""Proposal note model"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, Index

from winetours.database import Base


class AuthorType(str, enum.Enum):
    """Audience a note was written by"""
    CLIENT = "client"
    STAFF = "staff"


class ProposalNote(Base):
    """One message in a client/staff thread on a trip proposal"""
    __tablename__ = "proposal_notes"
    __table_args__ = (
        Index("ix_proposal_notes_unread", "trip_proposal_id", "author_type", "is_read"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    trip_proposal_id = Column(Integer, nullable=False, index=True)

    # Author
    author_type = Column(String(20), nullable=False)
    author_name = Column(String(255), nullable=False)

    content = Column(Text, nullable=False)

    # Optional sub-topic scope, e.g. ("day", 2) or ("line_item", 14)
    context_type = Column(String(50))
    context_id = Column(Integer)

    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
