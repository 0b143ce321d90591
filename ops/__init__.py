"""
Operations package for the Election Results Dashboard

This package centralizes the operational tooling:
- Configuration management
- Data repositories (results, boundaries, wards)
- The dashboard CLI

The Config class is exposed at the package level for convenient imports:
    from ops import Config
"""

from .config_loader import Config

__all__ = ["Config"]
