from .base_collector import BaseCollector, Evidence, Signal
from .privilege import PrivilegeCollector
from .actions import Action, ActionCollector
from .redirects import RedirectCollector
from .paths import PathCollector
from .access import AllowedPathCollector, BlockedCommandCollector, ProtectedPathCollector

__all__ = [
    "BaseCollector",
    "Evidence",
    "Signal",
    "Action",
    "PrivilegeCollector",
    "ActionCollector",
    "RedirectCollector",
    "PathCollector",
    "BlockedCommandCollector",
    "AllowedPathCollector",
    "ProtectedPathCollector",
]
