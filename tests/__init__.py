"""Test suite for the command gateway.

Test structure follows the test pyramid:
- unit/: Components in isolation with in-memory or mocked adapters
- integration/: Real adapters (SQLite option store, rotating error file)
- api/: HTTP behaviour through the FastAPI TestClient
"""
