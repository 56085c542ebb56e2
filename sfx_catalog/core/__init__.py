"""
Discovery and access-control core for sfx-catalog.

This package contains pure business logic with no I/O and no logging:
tag normalization, relevance search, maturity classification, the access
gate state machine and the curated tag catalog. Everything here operates on
in-memory snapshots handed in by the caller.
"""

from __future__ import annotations

__all__ = []
