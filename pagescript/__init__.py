__version__ = "1.2.0"

from pagescript.errors import (
    CleanupError,
    EvaluationError,
    LaunchError,
    NavigationError,
    PageScriptError,
    ScriptLoadError,
    UsageError,
    VisualDiffError,
)
from pagescript.models import EvaluationResult, RunConfiguration, ScreenshotSpec

__all__ = [
    "__version__",
    "PageScriptError",
    "UsageError",
    "ScriptLoadError",
    "LaunchError",
    "NavigationError",
    "EvaluationError",
    "CleanupError",
    "VisualDiffError",
    "RunConfiguration",
    "ScreenshotSpec",
    "EvaluationResult",
]
