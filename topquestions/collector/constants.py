"""Constants for the collection run."""

# Rate limiting: burst of 30 calls, then one call per second
DEFAULT_BUCKET_CAPACITY = 30.0
DEFAULT_REFILL_PER_SECOND = 1.0

# Component names for log binding
COMPONENT_COLLECTOR = "collector"
