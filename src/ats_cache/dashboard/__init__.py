"""Cached dashboard service and HTTP API."""
