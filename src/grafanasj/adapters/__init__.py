"""Adapters connecting the core to frameworks and data sources."""
