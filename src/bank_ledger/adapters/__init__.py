"""Caller-facing adapters package."""
