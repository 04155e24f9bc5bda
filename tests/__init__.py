"""Test suite for the storefront edge layer.

Test structure:
- unit/: Unit tests - value objects, adapters and helpers over fakeredis
- api/: HTTP tests - middleware and routes through the ASGI app

No external services are needed: Redis is emulated in memory per test.
"""
