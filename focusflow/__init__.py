"""
FOCUSFLOW Analytics API

Task and mood analytics with cached productivity insights.
"""
