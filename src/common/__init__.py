"""Shared helpers: errors, logging, HTTP and URI transport."""
