"""
Catalog Engine
Query engine for an online product catalog: search with filters, ranking,
facets and pagination; autocomplete; similar and trending products; activity
tracking with learned preferences and recommendations.
"""

__version__ = "0.1.0"
