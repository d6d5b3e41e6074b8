"""
Unit tests for Checkmate.

Test individual components in isolation:
- Retry engine (consecutive successes, deadline, cancellation)
- Status code patterns and JSONPath templates
- Checks (HTTP via respx, TCP echo via loopback servers, local commands)
- Models and API helpers
"""
