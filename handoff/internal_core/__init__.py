from .config import HandoffConfig, load_config
from .dispatcher import ParseDispatchError, ParseDispatcher
from .parse_cache import ParseResultCache

__all__ = [
    "HandoffConfig",
    "load_config",
    "ParseDispatchError",
    "ParseDispatcher",
    "ParseResultCache",
]
