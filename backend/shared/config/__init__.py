"""
Unified Configuration Access Point
TABLEFORGE 애플리케이션의 모든 설정을 통합 관리

    from shared.config import get_settings

    cap = get_settings().editor.max_reconcile_lines
"""

from .settings import (
    ApplicationSettings,
    EditorSettings,
    Environment,
    ServiceSettings,
    TableApiSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "ApplicationSettings",
    "EditorSettings",
    "Environment",
    "ServiceSettings",
    "TableApiSettings",
    "get_settings",
    "reload_settings",
]
