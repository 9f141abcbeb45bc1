"""Command line interface for the processed-data service."""
