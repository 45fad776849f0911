"""
Probe modules for device profiling.

Each submodule covers one capability category.
"""

from . import llm
from . import vector
from . import memory

__all__ = [
    "llm",
    "vector",
    "memory",
]
