"""Shared constants and utilities used across the topology package."""
from __future__ import annotations

SERVICE_NAME = "topology"
