"""External integrations and the recommendation core."""
