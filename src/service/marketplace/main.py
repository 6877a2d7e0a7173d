"""
Ticket Marketplace - Main Application
Handles sign-in and roles, the ticket catalog and the booking workflow.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.driven_adapter.repo.ticket_repo_impl import sync_advertisement_slots


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Marketplace] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Marketplace] Dependency injection wired')

    database = container.database()
    await database.create_tables()

    session = database.new_session()
    try:
        await sync_advertisement_slots(session)
    finally:
        await session.close()

    Logger.base.info('✅ [Marketplace] Startup complete')

    yield

    Logger.base.info('🛑 [Marketplace] Shutting down...')
    await database.dispose()
    container.unwire()
    Logger.base.info('👋 [Marketplace] Shutdown complete')


app = create_app(lifespan=lifespan)
