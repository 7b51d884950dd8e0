"""
SUBPACE - Subdomain Paced Enumeration

A command-line subdomain enumeration tool that resolves candidate names from
a wordlist against a target domain at a controlled queries-per-second rate,
reporting for each candidate whether it resolves.
"""

__version__ = "1.0.0"
__author__ = "SUBPACE Development Team"
