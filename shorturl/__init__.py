"""
shorturl package initializer.
"""

from . import analytics
from . import logsink
from . import manager
from . import storage

__all__ = ["analytics", "logsink", "manager", "storage"]
