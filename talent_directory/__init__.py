"""
Top-level package for the talent directory.

This package contains the employee directory (keyword search over an
in-memory roster or a DynamoDB table), the "similar employees" ranking,
the peer recommendation store and a small FastAPI application that
serves them.  There are no side-effects on import; ``python -m
talent_directory.cli`` is the command line entry point.
"""
from __future__ import annotations
