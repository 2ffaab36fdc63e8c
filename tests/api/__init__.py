"""API tests package.

Request/response tests for the HTTP endpoints using TestClient, with the
container dependencies overridden (no Redis, DNS or network access).
"""
