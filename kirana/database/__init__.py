"""
Database package.

- base: declarative base and mixins
- connection: async engine, session factory, and the request session dependency
- models: ORM models for every marketplace table
"""

__all__ = []
