"""
Services for the bulk recruiter import pipeline.

Each stage is a small module so it can be tested on its own:
sheet_source -> recruiter_validator -> recruiter_dedup ->
recruiter_inserter -> import_reporter, orchestrated by
recruiter_import_service.
"""

from src.services.recruiter_import_service import RecruiterImportService

__all__ = [
    "RecruiterImportService",
]
