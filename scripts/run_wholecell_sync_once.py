import asyncio
import logging

from app.core.config import get_settings
from app.database import async_session
from app.routes.sync import run_wholecell_sync_background
from app.services.sync_progress import SyncProgressChannel
from app.services.wholecell.client import WholeCellClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def log_event(event):
    if event["type"] == "progress":
        logger.info("Progress %s%% (%s synced, %s errors of %s)",
                    event["progress"], event["synced"], event["errors"], event["total"])
    else:
        logger.info("Sync %s: %s", event["type"], event.get("message"))


async def main():
    settings = get_settings()
    logger.info("DATABASE_URL=%s", settings.DATABASE_URL)
    logger.info("Starting WholeCell sync (status filter=%s)", settings.wholecell_status_filter)

    channel = SyncProgressChannel(listeners=[log_event])
    channel.detach()  # no stream consumer; events only go to the log
    result = await run_wholecell_sync_background(
        session_factory=async_session,
        client=WholeCellClient.from_settings(settings),
        settings=settings,
        channel=channel,
    )
    logger.info("Completed WholeCell sync: %s", result.to_dict())

if __name__ == "__main__":
    asyncio.run(main())
