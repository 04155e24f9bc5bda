"""Infrastructure layer - Adapters implementing domain protocols.

Structure:
- cache/: Redis keyed store, response cache, invalidation hooks
- rate_limit/: Fixed window limiter and tier registry
- analytics/: Counter pipeline on the keyed store
- logging/: structlog console adapter
- persistence/: In-memory document repository

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
