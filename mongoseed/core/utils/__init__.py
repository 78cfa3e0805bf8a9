"""Utility functions shared across the mongoseed packages."""

from mongoseed.core.utils.checks import ifnone

__all__ = ["ifnone"]
