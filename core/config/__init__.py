"""
설정 패키지

settings.yaml 로더와 엔진 설정 데이터클래스
"""

from core.config.loader import (
    EngineSettings,
    Settings,
    SettingsLoadError,
    get_settings,
    load_settings,
)

__all__ = [
    "EngineSettings",
    "Settings",
    "SettingsLoadError",
    "get_settings",
    "load_settings",
]
