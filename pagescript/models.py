import json
import re
from datetime import date, datetime, time
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _json_default(value: Any) -> Any:
    # values Playwright deserialises that json cannot encode
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, re.Pattern):
        return value.pattern
    return str(value)


class ScreenshotSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    output: str
    compare: Optional[str] = None
    diff: Optional[str] = None


class RunConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    script_files: List[str] = Field(default_factory=list)
    inline_script: Optional[str] = None
    internal_script: Optional[str] = None
    screenshot: Optional[ScreenshotSpec] = None
    interactive: bool = False
    cleanup: bool = False
    quiet: bool = False
    strict: bool = False
    verbose: bool = False

    @property
    def has_page_scripts(self) -> bool:
        return bool(self.script_files) or self.inline_script is not None

    @property
    def has_work(self) -> bool:
        return (
            self.has_page_scripts
            or self.internal_script is not None
            or self.interactive
            or self.screenshot is not None
        )


class ScriptSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    text: str = ""


class EvaluationResult(BaseModel):
    source: str
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def render(self) -> str:
        if self.error is not None:
            return f"Error: {self.error}"
        if self.value is None:
            return ""
        if isinstance(self.value, str):
            return self.value
        return json.dumps(self.value, ensure_ascii=False, default=_json_default)


class DiffResult(BaseModel):
    width: int
    height: int
    mismatched_pixels: int
    diff_path: Optional[str] = None

    @property
    def mismatch_ratio(self) -> float:
        total = self.width * self.height
        if total == 0:
            return 0.0
        return self.mismatched_pixels / total

    @property
    def identical(self) -> bool:
        return self.mismatched_pixels == 0


def join_results(results: List[EvaluationResult]) -> str:
    return "\n".join(result.render() for result in results)


class RunOutcome(BaseModel):
    results: List[EvaluationResult] = Field(default_factory=list)
    closed_by_user: bool = False

    @property
    def output(self) -> str:
        return join_results(self.results)

    @property
    def has_output(self) -> bool:
        return bool(self.results)
