"""Utility modules for SUBPACE."""
