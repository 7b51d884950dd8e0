"""Core scheduling components and data models for SUBPACE."""
