"""
Source loaders: turn source descriptors into partitioned row collections.
"""

from querysketch.sources.base import (
    InMemorySourceLoader,
    SourceLoader,
    resolve_reader_settings,
)
from querysketch.sources.polars_loader import PolarsSourceLoader

__all__ = [
    "InMemorySourceLoader",
    "PolarsSourceLoader",
    "SourceLoader",
    "resolve_reader_settings",
]
