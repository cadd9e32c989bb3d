"""
Catalog Engine API
FastAPI transport over the search and activity engine.
"""
