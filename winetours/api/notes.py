"""Proposal note thread API endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends

from winetours.api.deps import get_services
from winetours.models.proposal_note import AuthorType
from winetours.schemas.proposal_note import (
    MarkReadRequest,
    MarkReadResponse,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    ThreadSummary,
    UnreadCountResponse,
)
from winetours.services import Services

router = APIRouter()


@router.get("/proposals/{proposal_id}/notes", response_model=NoteListResponse)
async def list_notes(
    proposal_id: int,
    context_type: Optional[str] = None,
    context_id: Optional[int] = None,
    general_only: bool = False,
    services: Services = Depends(get_services),
):
    """List notes on a proposal, oldest first"""
    notes = await services.notes.get_notes(
        proposal_id,
        context_type=context_type,
        context_id=context_id,
        general_only=general_only,
    )
    return NoteListResponse(notes=notes)


@router.post("/proposals/{proposal_id}/notes", response_model=NoteResponse, status_code=201)
async def create_note(
    proposal_id: int,
    note_data: NoteCreate,
    services: Services = Depends(get_services),
):
    """Add a note to a proposal thread"""
    return await services.notes.create_note(
        proposal_id,
        note_data.author_type,
        note_data.author_name,
        note_data.content,
        context_type=note_data.context_type,
        context_id=note_data.context_id,
    )


@router.get("/proposals/{proposal_id}/notes/unread", response_model=UnreadCountResponse)
async def get_unread_count(
    proposal_id: int,
    author_type: Optional[AuthorType] = None,
    services: Services = Depends(get_services),
):
    """Unread notes, optionally only those written by author_type"""
    count = await services.notes.get_unread_count(proposal_id, author_type)
    return UnreadCountResponse(count=count)


@router.post("/proposals/{proposal_id}/notes/read", response_model=MarkReadResponse)
async def mark_notes_read(
    proposal_id: int,
    read_data: MarkReadRequest,
    services: Services = Depends(get_services),
):
    """Mark all notes written by author_type as read"""
    updated = await services.notes.mark_as_read(proposal_id, read_data.author_type)
    return MarkReadResponse(updated=updated)


@router.get("/proposals/{proposal_id}/notes/summary", response_model=ThreadSummary)
async def get_thread_summary(
    proposal_id: int,
    services: Services = Depends(get_services),
):
    """Thread totals for dashboards"""
    return await services.notes.get_thread_summary(proposal_id)


@router.post("/notes/{note_id}/read", response_model=NoteResponse)
async def mark_note_read(
    note_id: int,
    services: Services = Depends(get_services),
):
    """Mark a single note as read"""
    return await services.notes.mark_note_as_read(note_id)
