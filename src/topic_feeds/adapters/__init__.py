"""Adapters for feed retrieval and snapshot storage."""
