# tests/__init__.py
"""
Test suite for the agent chat service.

- unit: pure functions, schemas, provider classification
- integration: services and HTTP routes against a SQLite database
- e2e: complete chat workflows over HTTP
- factories: Factory Boy factories for database models
"""
