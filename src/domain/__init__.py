"""Domain layer - request-shaping rules without infrastructure.

Structure:
- enums/: Tier names, identity strategies, resource types, cache status
- value_objects/: Immutable rules, results and analytics events
- protocols/: Ports implemented by infrastructure adapters
- errors/: Domain error dataclasses carried in Result types

The domain layer has NO dependencies on any framework or infrastructure.
"""
