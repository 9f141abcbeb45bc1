"""Prometheus scrape endpoint."""
