"""Taskboard Core Platform Module.

Shared infrastructure used by the resource modules:
- Record store (PostgreSQL pool or JSON file)
- Authentication (passwords, session tokens, request guard)
- Error taxonomy and API helpers
"""
