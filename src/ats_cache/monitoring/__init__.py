"""Logging setup for ats-cache."""
