"""Load the demo catalogue into Cassandra.

Creates the keyspace and tables when missing, then the three demo courses
and the demo learner's enrollment. Safe to run more than once.

Usage:
    python -m scripts.seed_demo
"""

import asyncio

from learnease.config import get_settings
from learnease.core.database import init_async_cassandra, shutdown_async_cassandra
from learnease.core.logging import configure_structlog, get_logger
from learnease.courses.seed import seed_demo
from learnease.courses.service import CourseService
from learnease.progress.store import EnrollmentStore


logger = get_logger(__name__)


async def run_seed() -> None:
    """Run the seed."""
    settings = get_settings()
    keyspace = settings.cassandra_keyspace

    logger.info("seed_starting", keyspace=keyspace, hosts=settings.cassandra_hosts)

    session = await init_async_cassandra()
    try:
        # No Redis here: the API cache expires on its own TTL.
        course_service = CourseService(session=session, keyspace=keyspace)
        store = EnrollmentStore(session=session, keyspace=keyspace)
        counts = await seed_demo(course_service, store)
        logger.info("seed_completed", **counts)
    finally:
        await shutdown_async_cassandra()


if __name__ == "__main__":
    configure_structlog(get_settings())
    asyncio.run(run_seed())
