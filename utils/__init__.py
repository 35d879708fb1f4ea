"""Shared helpers: configuration, logging, errors and git scope lookup."""
