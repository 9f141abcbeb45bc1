"""Prometheus metrics registry and shared collectors."""

from __future__ import annotations

from .prometheus import REGISTRY

__all__ = ["REGISTRY"]
