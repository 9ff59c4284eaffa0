"""Shared utilities for jogserver."""
