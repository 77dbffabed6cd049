from .runtime import RuntimeDeps
from .settings import AppSettings
from .session import ClientSession, SessionParams

__all__ = ["AppSettings", "ClientSession", "RuntimeDeps", "SessionParams"]
