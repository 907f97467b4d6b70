"""Command-line client for the aquarium monitor service."""
