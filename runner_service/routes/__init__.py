"""
Import service route modules.

Each module handles a specific area of functionality.
"""

from .recruiter_import import router as recruiter_import_router

__all__ = [
    "recruiter_import_router",
]
