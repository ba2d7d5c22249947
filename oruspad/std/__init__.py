from .core import populate_core_environment
