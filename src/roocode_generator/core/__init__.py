"""Core application components.

``bootstrap`` lives in :mod:`roocode_generator.core.bootstrap`; it is not
re-exported here because it imports the config and provider packages, which
themselves depend on this package.
"""

from .app_context import AppContext
from .result import Result

__all__ = ["AppContext", "Result"]
