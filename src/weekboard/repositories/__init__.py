"""Repository interfaces for weekboard.

This package contains abstract base classes (ABCs) that define the contracts
for data persistence operations. These are the "Ports" in the Hexagonal Architecture.

Implementations (Adapters) are in:
- weekboard.adapters.sqlite (local relational store)
- weekboard.adapters.rest_api (remote document store)
"""

from .repository import TaskRepository, UserRepository, ensure_history_extends

__all__ = [
    "TaskRepository",
    "UserRepository",
    "ensure_history_extends",
]
