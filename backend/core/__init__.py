"""Core backend infrastructure for the mentorship portal.

Configuration, logging, database access, security helpers, error handlers
and request dependencies used by the FastAPI application entrypoint.
"""
