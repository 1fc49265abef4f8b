"""API tests package.

End-to-end tests through the FastAPI TestClient. Every test builds a fresh
application on a cleared container, so rate windows and histories never
leak between tests.
"""
