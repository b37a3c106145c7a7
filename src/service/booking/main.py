"""
Flight Booking Service - Main Application

Flight catalog, seat booking, cancellation and check-in over one async SQL store.
"""

from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI

from src.platform.app_factory import SERVICE_NAME, create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Booking Service] Starting up...')

    tracing = TracingConfig(service_name=SERVICE_NAME)
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    Logger.base.info('📊 [Booking Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Booking Service] Dependency injection wired')

    await create_db_and_tables()
    Logger.base.info('🗄️ [Booking Service] Database tables ready')

    async with anyio.create_task_group() as background_task_group:
        # Fire-and-forget notifications run on this task group
        container.background_task_group.override(background_task_group)
        Logger.base.info('✅ [Booking Service] Startup complete')

        yield

        Logger.base.info('🛑 [Booking Service] Shutting down...')
        container.background_task_group.reset_override()
        # Let in-flight notifications finish; the group exits once they do

    await dispose_engine()
    tracing.shutdown()
    container.unwire()
    Logger.base.info('👋 [Booking Service] Shutdown complete')


app = create_app(lifespan=lifespan)
