"""Background job tasks"""

import asyncio
import structlog

from winetours.jobs.celery_app import celery_app

logger = structlog.get_logger()


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


@celery_app.task(name="send_operations_digest")
def send_operations_digest():
    """Email the daily operations digest to staff"""
    logger.info("Sending operations digest")

    async def _send():
        from winetours.database import create_engine, create_session_factory
        from winetours.services import build_services

        # Fresh engine per run: asyncio.run gives each task its own event loop
        engine = create_engine()
        try:
            services = build_services(create_session_factory(engine))
            digest = await services.digest.send()
        finally:
            await engine.dispose()

        return {
            "pending_reservations": digest.pending_reservations,
            "expiring_consultations": len(digest.expiring_consultations),
            "unread_client_notes": digest.unread_client_notes,
        }

    return run_async(_send())
