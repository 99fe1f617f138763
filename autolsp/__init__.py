"""
autolsp - lazy language server activation.

Activates language servers the first time a buffer of a matching filetype
is seen, and replays editor events so already-open buffers attach.
"""

__version__ = "0.1.0"

from .engine import ActivationEngine
from .host import AutocmdOptions, DeferredQueue, Host, LogLevel
from .models import CheckState, Flag, Producer, ProviderDef, StaticTable

__all__ = [
    "__version__",
    "ActivationEngine",
    "AutocmdOptions",
    "CheckState",
    "DeferredQueue",
    "Flag",
    "Host",
    "LogLevel",
    "Producer",
    "ProviderDef",
    "StaticTable",
]
