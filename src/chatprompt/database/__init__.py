"""
Relational storage: engine, sessions and ORM models.
"""
