"""
FOCUSFLOW Analytics API - Analytics Module

Bucket aggregation, caching and productivity insights.
Import the router from ``focusflow.analytics.router``.
"""
