"""
Persistence layer: repositories and the unit of work.
"""

from .unit_of_work import UnitOfWork

__all__ = ["UnitOfWork"]
