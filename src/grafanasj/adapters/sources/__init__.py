"""Datasource adapters implementing the collaborator ports."""

from grafanasj.adapters.sources.in_memory import InMemorySource

__all__ = ["InMemorySource"]
