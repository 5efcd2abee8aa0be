"""Core infrastructure shared by the handle modules.

Submodules:
    library: Lazy libclang locator and loader
    lifetime: Generation-checked lifetime arena (Lifetime, Lease)
    depth_guard: Recursion limiting for Python-side cursor visitors

Python 3.13+.
"""

from .depth_guard import DepthGuard, DepthLimitExceededError, depth_clamp
from .library import (
    LibclangUnavailableError,
    get_library,
    is_libclang_available,
    locate_library,
)
from .lifetime import Lease, Lifetime

__all__ = [
    "DepthGuard",
    "DepthLimitExceededError",
    "Lease",
    "LibclangUnavailableError",
    "Lifetime",
    "depth_clamp",
    "get_library",
    "is_libclang_available",
    "locate_library",
]
