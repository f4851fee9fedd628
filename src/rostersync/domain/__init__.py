"""Roster reconciliation domain: records, ports and the reconciliation engine."""
