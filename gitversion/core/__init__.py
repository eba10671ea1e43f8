"""Core interfaces and abstractions for gitversion."""

from gitversion.core.interfaces import CommitInfo, Repository

__all__ = ["CommitInfo", "Repository"]
