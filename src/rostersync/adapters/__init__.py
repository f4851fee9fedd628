"""Concrete adapters for the reconciliation ports."""
