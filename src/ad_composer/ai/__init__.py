from ad_composer.config import Settings, get_settings

from .base import CopyGenerator, ZoneAnalyzer
from .copywriter import OpenAICopyGenerator
from .mock import MockCopyGenerator, MockZoneAnalyzer
from .zones import AnthropicZoneAnalyzer


def create_ai_backend(settings: Settings | None = None) -> tuple[ZoneAnalyzer, CopyGenerator]:
    """Zone analyzer + copy generator pair for the configured backend."""
    settings = settings or get_settings()
    if settings.ai_backend == "live":
        return AnthropicZoneAnalyzer(), OpenAICopyGenerator()
    return MockZoneAnalyzer(), MockCopyGenerator()


__all__ = [
    "ZoneAnalyzer",
    "CopyGenerator",
    "MockZoneAnalyzer",
    "MockCopyGenerator",
    "AnthropicZoneAnalyzer",
    "OpenAICopyGenerator",
    "create_ai_backend",
]
