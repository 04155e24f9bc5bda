"""Presentation layer - API endpoints and HTTP concerns.

This layer contains FastAPI routers, the request-shaping middleware and the
RFC 7807 error translation. Handlers stay thin: they call repositories and
adapters resolved from the container and translate Results to responses.

Structure:
- routers/system.py: Root, health and config endpoints
- routers/api/middleware/: Rate limit, analytics, response cache, identity
- routers/api/v1/: API version 1 resources and admin routes
"""
