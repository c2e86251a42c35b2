"""
FOCUSFLOW Analytics API - Tasks Module

Task event store and logging endpoints.
"""

from focusflow.tasks.router import router as tasks_router

__all__ = ["tasks_router"]
