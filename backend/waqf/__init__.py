"""Expose the application factory at package level.

Callers can ``from waqf import create_app`` without traversing the package
structure (used by ``wsgi.py`` and the test-suite).
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
