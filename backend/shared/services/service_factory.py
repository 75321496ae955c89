"""
Service Factory Module

Builds the FastAPI application for a TABLEFORGE service: CORS from settings,
request timing middleware, health endpoints, and a uvicorn launcher whose log
lines use the shared console format.
"""

import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import get_settings
from shared.models.responses import ApiResponse
from shared.utils.app_logger import LOG_FORMAT, get_logger

logger = get_logger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time"


@dataclass(frozen=True)
class ServiceInfo:
    """Service identity, bind address and OpenAPI tags"""

    name: str
    title: str
    description: str
    version: str = "0.1.0"
    port: int = 8000
    host: str = "localhost"
    tags: List[Dict[str, str]] = field(default_factory=list)


def create_fastapi_service(
    service_info: ServiceInfo,
    custom_lifespan: Optional[Callable] = None,
    include_health_check: bool = True,
    include_logging_middleware: bool = True,
) -> FastAPI:
    """
    Create the FastAPI application for a service.

    Args:
        service_info: Service identity and tags
        custom_lifespan: Lifespan context manager; a logging-only one is used when omitted
        include_health_check: Register "/" and "/health"
        include_logging_middleware: Log method, path, status and elapsed time per request
    """

    @asynccontextmanager
    async def default_lifespan(app: FastAPI):
        logger.info(f"{service_info.name} 서비스 시작")
        yield
        logger.info(f"{service_info.name} 서비스 종료")

    app = FastAPI(
        title=service_info.title,
        description=service_info.description,
        version=service_info.version,
        lifespan=custom_lifespan or default_lifespan,
        openapi_tags=[{"name": "Health", "description": "Health check and service status"}, *service_info.tags],
    )

    _configure_cors(app)
    if include_logging_middleware:
        _add_logging_middleware(app)
    if include_health_check:
        _add_health_check(app, service_info)

    logger.info(f"✅ {service_info.name} FastAPI 앱 생성 완료")
    return app


def _configure_cors(app: FastAPI) -> None:
    services = get_settings().services
    if not services.cors_enabled:
        logger.info("🚫 CORS disabled")
        return

    origins = services.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"🌐 CORS enabled with origins: {origins}")


def _add_logging_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.4f}"
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed:.4f}s)")
        return response


def _open_session_count(app: FastAPI) -> Optional[int]:
    editor_service = getattr(app.state, "editor_service", None)
    return editor_service.session_count if editor_service is not None else None


def _add_health_check(app: FastAPI, service_info: ServiceInfo) -> None:
    @app.get("/", tags=["Health"])
    async def root():
        """루트 엔드포인트"""
        return {
            "service": service_info.name,
            "title": service_info.title,
            "version": service_info.version,
            "status": "running",
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """헬스 체크 (열린 편집 세션 수 포함)"""
        return ApiResponse.health_check(
            service_info.name, service_info.version, open_sessions=_open_session_count(request.app)
        ).to_dict()


def create_uvicorn_config(service_info: ServiceInfo, reload: Optional[bool] = None) -> Dict[str, Any]:
    """
    uvicorn keyword arguments for a service.

    reload defaults to on in development only.
    """
    app_settings = get_settings()
    return {
        "host": service_info.host,
        "port": service_info.port,
        "reload": app_settings.is_development if reload is None else reload,
        "log_config": _get_logging_config(app_settings.log_level.upper()),
    }


def _get_logging_config(level: str) -> Dict[str, Any]:
    """dictConfig routing uvicorn's loggers through the shared console format"""
    console = {"formatter": "console", "class": "logging.StreamHandler", "stream": "ext://sys.stdout"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"console": {"format": LOG_FORMAT}},
        "handlers": {"console": console},
        "loggers": {
            "uvicorn": {"handlers": ["console"], "level": level, "propagate": False},
            "uvicorn.error": {"level": level},
            "uvicorn.access": {"handlers": ["console"], "level": level, "propagate": False},
        },
    }


def run_service(service_info: ServiceInfo, app_module_path: str, reload: Optional[bool] = None) -> None:
    """Serve app_module_path (e.g. "grid_editor.main:app") with uvicorn."""
    uvicorn.run(app_module_path, **create_uvicorn_config(service_info, reload))


GRID_EDITOR_SERVICE_INFO = ServiceInfo(
    name="GridEditor",
    title="Grid Editor Service",
    description="스프레드시트형 테이블 편집 세션, 붙여넣기 조정 및 일괄 저장 서비스",
    version="0.1.0",
    port=get_settings().services.grid_editor_port,
    host=get_settings().services.grid_editor_host,
    tags=[
        {"name": "Tables", "description": "Table catalogue"},
        {"name": "Edit Sessions", "description": "Edit buffer operations, paste and bulk entry"},
    ],
)
