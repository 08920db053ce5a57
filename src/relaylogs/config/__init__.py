"""Configuration management."""
from relaylogs.config.settings import Config
from relaylogs.config.path_resolver import PathResolver
from relaylogs.config.constants import *

__all__ = [
    "Config",
    "PathResolver",
]
