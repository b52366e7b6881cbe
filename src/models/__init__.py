"""Models package for the org chart store."""

from src.models.base import Base
from src.models.employee import Employee

__all__ = [
    "Base",
    "Employee",
]
