"""Market Events: weekly market-moving event research, powered by LLM providers."""

__version__ = "0.1.0"
__author__ = "Market Events Team"

__all__ = ["__version__", "__author__"]
