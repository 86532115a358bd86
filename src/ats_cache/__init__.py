"""Bounded TTL cache and cached dashboard backend for an applicant tracking system."""

__version__ = "0.1.0"
