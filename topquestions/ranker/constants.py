"""Constants for the ranker."""

# Size of the retained ranking
TOP_K = 5
