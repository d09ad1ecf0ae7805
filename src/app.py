"""FastAPI 앱 팩토리"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from src.core.config import settings
from src.core.logging import logger
from src.api import health_router, availability_router
from src.engine.factory import build_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기

    엔진(세션/캐시/스로틀러)은 앱 하나당 한 번 생성되어 app.state에 보관됩니다.
    """
    logger.info("Starting application...")
    bundle = build_engine(settings)
    app.state.engine = bundle.engine
    app.state.bundle = bundle
    bundle.sweeper.start()
    logger.info("Application started")
    yield
    logger.info("Shutting down application...")
    bundle.sweeper.stop()
    try:
        from src.crawlers.http_client import shutdown_shared_http_client
        await shutdown_shared_http_client()
    except Exception as e:
        logger.warning(f"HTTP client shutdown failed: {type(e).__name__}: {e}")


def create_app() -> FastAPI:
    """
    FastAPI 앱 생성 (Factory Pattern)

    Returns:
        FastAPI 앱 인스턴스
    """
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )

    # CORS (확장 프로그램 content script에서 호출)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 라우터 등록
    app.include_router(health_router)
    app.include_router(availability_router)

    return app

# 앱 인스턴스 생성 (uvicorn이 로드할 수 있도록)
app = create_app()
