"""Brogue object vocabulary and typed object reconstruction."""
