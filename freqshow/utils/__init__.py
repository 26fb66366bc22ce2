"""Utility modules: error hierarchy, logging, concurrency helpers, catalog rules."""
