"""Proposal note schemas"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from winetours.models.proposal_note import AuthorType


class NoteCreate(BaseModel):
    """Create note request"""
    author_type: AuthorType
    author_name: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    context_type: Optional[str] = Field(default=None, max_length=50)
    context_id: Optional[int] = None

    @field_validator("author_name", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class MarkReadRequest(BaseModel):
    """Mark every note by the given author type as read"""
    author_type: AuthorType


class NoteResponse(BaseModel):
    """Note response"""
    id: int
    trip_proposal_id: int
    author_type: str
    author_name: str
    content: str
    context_type: Optional[str]
    context_id: Optional[int]
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NoteListResponse(BaseModel):
    """Notes for a proposal, oldest first"""
    notes: List[NoteResponse]


class UnreadCountResponse(BaseModel):
    """Unread note count"""
    count: int


class MarkReadResponse(BaseModel):
    """Number of notes flipped to read"""
    updated: int


class ThreadSummary(BaseModel):
    """Per-proposal thread counts"""
    trip_proposal_id: int
    total: int
    unread_from_client: int
    unread_from_staff: int
