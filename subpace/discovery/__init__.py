"""Candidate loading and resolution workers for SUBPACE."""
