"""uxassert command line interface."""
