"""Repository classes for dashboard data access."""

from .fetch import fetch_json
from .results import ResultRepository
from .spatial import BoundaryRepository, ward_filename

__all__ = ["BoundaryRepository", "ResultRepository", "fetch_json", "ward_filename"]
