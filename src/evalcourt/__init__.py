"""evalcourt - run evaluation datasets against pluggable LLM judges."""

__version__ = "0.1.0"
