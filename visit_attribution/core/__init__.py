"""Functional core: entities, ports and pure services."""
