"""Versions, dependency parsing and resolution."""
