"""
Test-specific FastAPI Application

Same routes and handlers as the service, without tracing exporters or the background
task group. Notifications fall back to plain asyncio tasks that tests can drain.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🧪 [Test App] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Test App] Dependency injection wired')

    await create_db_and_tables()
    Logger.base.info('🗄️  [Test App] Database tables created')

    yield

    Logger.base.info('🛑 [Test App] Shutting down...')
    await container.notification_dispatcher().drain()
    container.unwire()
    Logger.base.info('👋 [Test App] Shutdown complete')


app = create_app(
    lifespan=lifespan_for_tests,
    title_suffix=' (Test)',
    description='Test Application - no tracing exporter, no background task group',
    service_name='test-flight-booking-service',
)
