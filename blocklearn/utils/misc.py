import importlib.util
import logging
from pathlib import Path

from tqdm import tqdm

logger = logging.getLogger(__name__)


def load_module(script_path: Path, module_name: str = "module"):
    spec = importlib.util.spec_from_file_location(module_name, script_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Can't import module at '{script_path}'")
    model_script = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(model_script)
    return model_script


def try_tqdm(iterable, enabled: bool = True, **kwargs):
    """Wrap ``iterable`` in a tqdm progress bar unless disabled."""
    if not enabled:
        return iterable
    return tqdm(iterable, **kwargs)
