"""Daily operations digest for staff"""

import asyncio
import html
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

import structlog
from sqlalchemy import select, func, exists
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from winetours.config import settings
from winetours.models.itinerary import Itinerary, ItineraryStop
from winetours.models.proposal_note import AuthorType, ProposalNote
from winetours.models.reservation import Reservation, ReservationStatus
from winetours.schemas.digest import Digest, DigestReservation
from winetours.services.email import EmailDispatcher
from winetours.services.reservations import ReservationService

logger = structlog.get_logger()

OPEN_STATUSES = (
    ReservationStatus.PENDING.value,
    ReservationStatus.CONTACTED.value,
    ReservationStatus.CONFIRMED.value,
)


class DigestService:
    """Builds, renders and sends the operations digest"""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        reservations: ReservationService,
        dispatcher: EmailDispatcher,
    ):
        self.session_factory = session_factory
        self.reservations = reservations
        self.dispatcher = dispatcher

    async def build(self, now: Optional[datetime] = None) -> Digest:
        """Run the digest queries concurrently, each in its own session"""
        now = now or datetime.utcnow()
        today = now.date()

        (
            pending,
            new,
            expiring,
            upcoming,
            unread_client,
            awaiting_reply,
            without_stops,
        ) = await asyncio.gather(
            self._scalar(
                select(func.count(Reservation.id))
                .where(Reservation.status == ReservationStatus.PENDING.value)
            ),
            self._scalar(
                select(func.count(Reservation.id))
                .where(Reservation.created_at >= now - timedelta(hours=24))
            ),
            self.reservations.list_expiring_consultations(within_hours=24, now=now),
            self._rows(
                select(Reservation)
                .where(
                    Reservation.status.in_(OPEN_STATUSES),
                    Reservation.preferred_date >= today,
                    Reservation.preferred_date <= today + timedelta(days=settings.digest_lookahead_days),
                )
                .order_by(Reservation.preferred_date.asc(), Reservation.id.asc())
            ),
            self._scalar(
                select(func.count(ProposalNote.id))
                .where(
                    ProposalNote.author_type == AuthorType.CLIENT.value,
                    ProposalNote.is_read.is_(False),
                )
            ),
            self._scalar(
                select(func.count(func.distinct(ProposalNote.trip_proposal_id)))
                .where(
                    ProposalNote.author_type == AuthorType.CLIENT.value,
                    ProposalNote.is_read.is_(False),
                )
            ),
            self._scalar(
                select(func.count(Itinerary.id))
                .where(~exists().where(ItineraryStop.itinerary_id == Itinerary.id))
            ),
        )

        digest = Digest(
            generated_at=now,
            pending_reservations=pending,
            new_reservations=new,
            expiring_consultations=[DigestReservation.model_validate(r) for r in expiring],
            upcoming_reservations=[DigestReservation.model_validate(r) for r in upcoming],
            unread_client_notes=unread_client,
            proposals_awaiting_reply=awaiting_reply,
            itineraries_without_stops=without_stops,
        )

        logger.info(
            "Digest built",
            pending=digest.pending_reservations,
            expiring=len(digest.expiring_consultations),
            unread_client_notes=digest.unread_client_notes,
        )
        return digest

    async def _scalar(self, query) -> int:
        async with self.session_factory() as db:
            return (await db.execute(query)).scalar() or 0

    async def _rows(self, query) -> list:
        async with self.session_factory() as db:
            return list((await db.execute(query)).scalars().all())

    def render(self, digest: Digest) -> Tuple[str, str, str]:
        """Render the digest as (subject, html, text)"""
        day = digest.generated_at.strftime("%Y-%m-%d")
        subject = f"Operations digest {day}: {digest.pending_reservations} pending reservations"

        summary = [
            ("Pending reservations", digest.pending_reservations),
            ("New reservations (24h)", digest.new_reservations),
            ("Consultations expiring (24h)", len(digest.expiring_consultations)),
            ("Unread client notes", digest.unread_client_notes),
            ("Proposals awaiting reply", digest.proposals_awaiting_reply),
            ("Itineraries without stops", digest.itineraries_without_stops),
        ]

        text_lines = [subject, ""]
        text_lines += [f"{label}: {value}" for label, value in summary]

        html_parts = [
            f"<h1>Operations digest {day}</h1>",
            "<table>",
            *(f"<tr><td>{label}</td><td>{value}</td></tr>" for label, value in summary),
            "</table>",
        ]

        for title, rows in (
            ("Consultations expiring", digest.expiring_consultations),
            ("Upcoming tours", digest.upcoming_reservations),
        ):
            if not rows:
                continue
            text_lines += ["", f"{title}:"]
            html_parts += [f"<h2>{title}</h2>", "<ul>"]
            for r in rows:
                line = (
                    f"{r.reservation_number} {r.customer_name}, party of {r.party_size}, "
                    f"{r.preferred_date.isoformat()} ({r.status})"
                )
                text_lines.append(f"- {line}")
                html_parts.append(f"<li>{html.escape(line)}</li>")
            html_parts.append("</ul>")

        return subject, "\n".join(html_parts), "\n".join(text_lines)

    async def send(self, recipients: Optional[List[str]] = None) -> Digest:
        """Build the digest and email it to the configured recipients"""
        digest = await self.build()
        recipients = recipients or settings.digest_recipients_list

        if not recipients:
            logger.info("Digest not sent, no recipients configured")
            return digest

        subject, html_body, text_body = self.render(digest)
        await self.dispatcher.send(recipients, subject, html_body, text_body)

        logger.info("Digest sent", recipients=len(recipients))
        return digest
