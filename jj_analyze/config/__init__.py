from .loader import load_config
from .models import (
    AnalyzeSettings,
    JJAnalyzeConfig,
    UIConfig,
)

__all__ = [
    "AnalyzeSettings",
    "JJAnalyzeConfig",
    "UIConfig",
    "load_config",
]
