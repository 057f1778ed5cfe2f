"""uxassert - validate UX assertions against screen recordings with a vision LLM."""

__version__ = "0.1.0"
