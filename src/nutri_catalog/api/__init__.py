"""HTTP API for the food catalog."""
