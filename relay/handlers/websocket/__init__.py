from .manager import handle_websocket_connection

__all__ = ["handle_websocket_connection"]
