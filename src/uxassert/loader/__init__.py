"""Assertion file loading."""

from uxassert.loader.assertions import AssertionsFileError, load_assertions

__all__ = ["AssertionsFileError", "load_assertions"]
