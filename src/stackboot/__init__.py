"""
stackboot - Development and production environment bootstrapper
"""

__version__ = "0.1.0"

from .core import Bootstrapper
from .errors import BootstrapError

__all__ = ["Bootstrapper", "BootstrapError"]
