"""Package marker for the recruiter import service."""

__version__ = "0.1.0"
