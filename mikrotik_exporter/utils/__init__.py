"""Shared helpers for collectors and logging."""
