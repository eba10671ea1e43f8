"""
Git operations module for gitversion.

Provides the GitPython implementation of the repository interface used by the
versioning engine.
"""

from .repository import GitRepository

__all__ = ["GitRepository"]
