"""Factory for per-session recognizer connections."""

from __future__ import annotations

from relay.state.session import SessionParams
from relay.state.settings import UpstreamSettings

from .session import ConnectFn, UpstreamSession


class UpstreamBridge:
    def __init__(self, *, settings: UpstreamSettings, connect_fn: ConnectFn | None = None) -> None:
        self._settings = settings
        self._connect_fn = connect_fn

    @property
    def configured(self) -> bool:
        return bool(self._settings.api_key)

    def new_session(self, params: SessionParams) -> UpstreamSession:
        """Build a fresh, unshared recognizer leg. Raises UpstreamConfigError without an API key."""
        return UpstreamSession(settings=self._settings, params=params, connect_fn=self._connect_fn)


__all__ = ["UpstreamBridge"]
