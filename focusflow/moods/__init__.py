"""
FOCUSFLOW Analytics API - Moods Module

Mood event store and logging endpoints.
"""

from focusflow.moods.router import router as moods_router

__all__ = ["moods_router"]
