from .bridge import UpstreamBridge
from .session import UpstreamSession
from .decoder import decode_message

__all__ = ["UpstreamBridge", "UpstreamSession", "decode_message"]
