"""
🔥 THINK ULTRA! Grid Editor Service - 독립 마이크로서비스
스프레드시트형 테이블 편집 세션 서비스

Port: 8004
"""

from dotenv import load_dotenv

load_dotenv()  # Load .env file

from contextlib import asynccontextmanager

from fastapi import FastAPI

from grid_editor.routers.table_editor_router import router as table_editor_router
from grid_editor.services.table_data_client import TableDataClient
from grid_editor.services.table_editor_service import TableEditorService
from shared.config.settings import get_settings
from shared.services.service_factory import GRID_EDITOR_SERVICE_INFO, create_fastapi_service, run_service
from shared.utils.app_logger import configure_logging, get_logger

configure_logging(get_settings().log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 이벤트"""
    logger.info("🚀 Grid Editor Service 시작")

    editor_service = TableEditorService(TableDataClient())
    app.state.editor_service = editor_service

    yield

    await editor_service.close()
    logger.info("🔄 Grid Editor Service 종료")


# FastAPI 앱 생성 - Service Factory 사용
app = create_fastapi_service(
    service_info=GRID_EDITOR_SERVICE_INFO,
    custom_lifespan=lifespan,
    include_health_check=True,
    include_logging_middleware=True,
)

# 라우터 등록
app.include_router(table_editor_router, prefix="/api/v1")


if __name__ == "__main__":
    run_service(GRID_EDITOR_SERVICE_INFO, "grid_editor.main:app")
