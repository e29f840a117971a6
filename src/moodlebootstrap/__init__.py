"""
moodle-bootstrap - local moodle-docker environment bootstrapper
"""

__version__ = "0.1.0"

from .core import BootstrapSequencer
from .errors import BootstrapError

__all__ = ["BootstrapSequencer", "BootstrapError"]
