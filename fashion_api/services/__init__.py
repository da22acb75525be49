"""
Service layer containing business logic.

Separates business logic from API routes for cleaner architecture.
"""
