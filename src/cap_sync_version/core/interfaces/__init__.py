"""Contracts (Protocol) implemented by the adapters."""
