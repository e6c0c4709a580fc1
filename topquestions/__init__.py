"""Top unanswered Stack Overflow questions from the search API."""

__version__ = "0.1.0"
