# ==============================================================================
# HEALTHFIT PACKAGE INITIALIZATION
# ==============================================================================
# Health & Fitness records API built on FastAPI
# Supports: SQLite, MongoDB
# Architecture: Schema Registry, Generic Resource Service, Adapter Pattern
# ==============================================================================

"""
Health & Fitness Records API
============================

One generic CRUD + search implementation serving nine record types
(users, contents, reports, feedbacks, products, activities, goals,
workouts, trainers), each described by a declarative field list.

Features:
---------
- Schema-as-data entity registry
- Generic resource service and router factory
- Free-text search over text fields
- SQLite (SQLAlchemy async) and MongoDB (Motor) storage adapters

Usage:
------
    from healthfit.main import app

    # Run with uvicorn
    uvicorn healthfit.main:app --reload
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
