"""
Integration tests for Checkmate.

Run checks end to end through the FastAPI app (TestClient).
"""
