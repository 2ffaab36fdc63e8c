"""Test suite for hostdetail.

- unit/: isolated tests with in-memory cache and stub resolvers
- integration/: Redis adapter against fakeredis, logging adapter output
- api/: HTTP endpoints through FastAPI's TestClient
"""
