"""Concrete ``Host`` implementations."""

from .local import LocalHost

__all__ = ["LocalHost"]
