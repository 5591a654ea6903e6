"""Note thread tracker for trip proposals"""

from datetime import datetime
from typing import List, Optional

import structlog
from sqlalchemy import select, func, update, case
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from winetours.errors import NotFoundError, ValidationError, parse_input
from winetours.models.proposal_note import AuthorType, ProposalNote
from winetours.schemas.proposal_note import NoteCreate, ThreadSummary

logger = structlog.get_logger()


def _author_value(author_type) -> str:
    try:
        return AuthorType(author_type).value
    except ValueError:
        raise ValidationError(
            "Invalid author type",
            {"author_type": ["must be 'client' or 'staff'"]},
        )


class NoteThreadTracker:
    """Per-proposal client/staff threads.

    Read state lives on each note and only matters to the audience that did
    not write it: staff clear client notes and clients clear staff notes.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create_note(
        self,
        proposal_id: int,
        author_type,
        author_name: str,
        content: str,
        context_type: Optional[str] = None,
        context_id: Optional[int] = None,
    ) -> ProposalNote:
        data = parse_input(NoteCreate, {
            "author_type": author_type,
            "author_name": author_name,
            "content": content,
            "context_type": context_type,
            "context_id": context_id,
        })

        async with self.session_factory() as db:
            note = ProposalNote(
                trip_proposal_id=proposal_id,
                author_type=data.author_type.value,
                author_name=data.author_name,
                content=data.content,
                context_type=data.context_type,
                context_id=data.context_id,
                is_read=False,
                created_at=datetime.utcnow(),
            )
            db.add(note)
            await db.commit()
            await db.refresh(note)

        logger.info(
            "Note created",
            note_id=note.id,
            proposal_id=proposal_id,
            author_type=note.author_type,
        )
        return note

    async def get_notes(
        self,
        proposal_id: int,
        context_type: Optional[str] = None,
        context_id: Optional[int] = None,
        general_only: bool = False,
    ) -> List[ProposalNote]:
        """Notes for a proposal, oldest first"""
        query = select(ProposalNote).where(ProposalNote.trip_proposal_id == proposal_id)

        if general_only:
            query = query.where(ProposalNote.context_type.is_(None))
        else:
            if context_type is not None:
                query = query.where(ProposalNote.context_type == context_type)
            if context_id is not None:
                query = query.where(ProposalNote.context_id == context_id)

        query = query.order_by(ProposalNote.created_at.asc(), ProposalNote.id.asc())

        async with self.session_factory() as db:
            result = await db.execute(query)
            return list(result.scalars().all())

    async def get_unread_count(self, proposal_id: int, for_author_type=None) -> int:
        """Unread notes, restricted to those written by for_author_type if given"""
        query = select(func.count(ProposalNote.id)).where(
            ProposalNote.trip_proposal_id == proposal_id,
            ProposalNote.is_read.is_(False),
        )
        if for_author_type is not None:
            query = query.where(ProposalNote.author_type == _author_value(for_author_type))

        async with self.session_factory() as db:
            return (await db.execute(query)).scalar()

    async def mark_as_read(self, proposal_id: int, author_type) -> int:
        """Mark every unread note written by author_type as read"""
        author = _author_value(author_type)

        async with self.session_factory() as db:
            result = await db.execute(
                update(ProposalNote)
                .where(
                    ProposalNote.trip_proposal_id == proposal_id,
                    ProposalNote.author_type == author,
                    ProposalNote.is_read.is_(False),
                )
                .values(is_read=True)
                .execution_options(synchronize_session=False)
            )
            await db.commit()

        logger.info("Notes marked read", proposal_id=proposal_id, author_type=author, count=result.rowcount)
        return result.rowcount

    async def mark_note_as_read(self, note_id: int) -> ProposalNote:
        async with self.session_factory() as db:
            note = await db.get(ProposalNote, note_id)
            if not note:
                raise NotFoundError("ProposalNote", note_id)

            if not note.is_read:
                note.is_read = True
                await db.commit()
                await db.refresh(note)

        return note

    async def get_thread_summary(self, proposal_id: int) -> ThreadSummary:
        """Total notes and unread counts per author type"""
        query = (
            select(
                ProposalNote.author_type,
                func.count(ProposalNote.id),
                func.sum(case((ProposalNote.is_read.is_(False), 1), else_=0)),
            )
            .where(ProposalNote.trip_proposal_id == proposal_id)
            .group_by(ProposalNote.author_type)
        )

        async with self.session_factory() as db:
            rows = (await db.execute(query)).all()

        total = 0
        unread = {AuthorType.CLIENT.value: 0, AuthorType.STAFF.value: 0}
        for author_type, count, unread_count in rows:
            total += count
            unread[author_type] = int(unread_count or 0)

        return ThreadSummary(
            trip_proposal_id=proposal_id,
            total=total,
            unread_from_client=unread[AuthorType.CLIENT.value],
            unread_from_staff=unread[AuthorType.STAFF.value],
        )
