import importlib.util
import inspect
import logging
from pathlib import Path
from types import ModuleType
from typing import Any, List, Optional, Sequence

from pagescript.errors import EvaluationError, ScriptLoadError
from pagescript.models import ScriptSource

logger = logging.getLogger(__name__)

INLINE_LABEL = "<inline>"
HOST_ENTRY_POINT = "run"


def _read_script(path: Path) -> str:
    with path.open("r", encoding="utf-8") as f:
        return f.read()


def load_scripts(
    paths: Sequence[str],
    *,
    strict: bool = False,
    inline_script: Optional[str] = None,
) -> List[ScriptSource]:
    """
    Resolve page-script sources to their text, keeping input order.

    In lenient mode a file that cannot be read is logged and replaced by an
    empty placeholder so its siblings still run. In strict mode the first
    unreadable file raises ScriptLoadError.
    """
    payload: List[ScriptSource] = []

    for raw_path in paths:
        path = Path(raw_path)
        if not path.is_file():
            if strict:
                raise ScriptLoadError(f"Script not found: {raw_path}")
            logger.error(f"Script not found: {raw_path}")
            payload.append(ScriptSource(label=raw_path))
            continue

        try:
            text = _read_script(path)
        except (OSError, UnicodeDecodeError) as e:
            if strict:
                raise ScriptLoadError(f"Could not read script {raw_path}: {e}") from e
            logger.error(f"Could not read script {raw_path}: {e}")
            payload.append(ScriptSource(label=raw_path))
            continue

        logger.debug(f"Loaded script {raw_path} ({len(text)} chars)")
        payload.append(ScriptSource(label=raw_path, text=text))

    if inline_script is not None:
        payload.append(ScriptSource(label=INLINE_LABEL, text=inline_script))

    return payload


def load_host_script(raw_path: str) -> ModuleType:
    path = Path(raw_path)
    if not path.is_file():
        raise ScriptLoadError(f"Internal script not found: {raw_path}")

    spec = importlib.util.spec_from_file_location(f"pagescript_host_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ScriptLoadError(f"Unable to load internal script: {raw_path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ScriptLoadError(f"Internal script {raw_path} failed to import: {e}") from e

    entry = getattr(module, HOST_ENTRY_POINT, None)
    if not callable(entry):
        raise ScriptLoadError(f"Internal script {raw_path} must define a callable '{HOST_ENTRY_POINT}(page)'")
    return module


async def run_host_script(module: ModuleType, page: Any, label: str) -> Any:
    entry = getattr(module, HOST_ENTRY_POINT)
    try:
        result = entry(page)
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        raise EvaluationError(label, str(e)) from e
    return result
