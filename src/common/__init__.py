"""Shared helpers used across the resolver packages."""
