from .settings import load_settings
from .logging import configure_logging
from .dependencies import build_runtime_deps

__all__ = ["build_runtime_deps", "configure_logging", "load_settings"]
