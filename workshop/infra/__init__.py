"""Declarative Azure topology and access grants for the workshop stack."""
