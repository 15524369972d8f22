"""CLI commands for fitpulse."""

from .init import init
from .profile import profile
from .recommend import recommend
from .serve import serve
from .sessions import achievements, complete, start

__all__ = [
    "achievements",
    "complete",
    "init",
    "profile",
    "recommend",
    "serve",
    "start",
]
