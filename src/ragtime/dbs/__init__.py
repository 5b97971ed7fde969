"""Database package for RagTime

This package contains:
- adapters: PostgreSQL/pgvector adapter and the two secondary data sources
- interfaces: Abstract base classes for database operations
"""
