"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.api.brewing import router as brewing_router
from src.api.health import router as health_router
from src.config import settings
from src.core.brewing.recipes import RecipeRegistry
from src.core.event_bus import EventBus
from src.core.logging import get_logger, setup_logging
from src.core.store import EntityStore
from src.db.database import SessionLocal, init_db
from src.modules.brewing.module import BrewingModule
from src.modules.module_manager import ModuleManager
from src.services.brewing_service import BrewingService
from src.services.persistence_service import PersistenceService

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # DB 테이블 생성
    logger.info("Creating database tables...")
    init_db()
    logger.info("Database tables created.")

    # 레시피북 로드
    registry = RecipeRegistry()
    registry.load_from_json(settings.RECIPES_PATH)
    app.state.recipe_registry = registry

    # 저장소 + 서비스 초기화
    logger.info("Initializing BrewingService...")
    store = EntityStore()
    event_bus = EventBus()
    brewing_service = BrewingService(
        store=store,
        recipes=registry,
        event_bus=event_bus,
        tuning=settings.brew_tuning(),
    )
    db_session = SessionLocal()
    app.state.event_bus = event_bus
    app.state.brewing_service = brewing_service
    app.state.persistence_service = PersistenceService(db_session, store)
    logger.info("BrewingService initialized (%d recipes).", registry.count())

    # 틱 드라이버
    module_manager = ModuleManager(event_bus)
    brewing_module = BrewingModule(brewing_service)
    module_manager.register(brewing_module)
    module_manager.enable("brewing")
    app.state.module_manager = module_manager
    app.state.brewing_module = brewing_module

    yield

    # 종료 시 정리
    logger.info("Shutting down...")
    db_session.close()


app = FastAPI(title="Cauldron Brew", lifespan=lifespan)

app.include_router(health_router)
app.include_router(brewing_router)
