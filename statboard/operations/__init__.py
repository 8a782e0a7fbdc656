"""
Operations Layer

Write-side business logic composed over the database layer:
- StatOperations: Stat event recording and stat definition lookup
"""

from .stat_operations import StatOperations, StatOperationError, StatValidationError

__all__ = ['StatOperations', 'StatOperationError', 'StatValidationError']
