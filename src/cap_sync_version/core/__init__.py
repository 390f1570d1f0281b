"""Core: version parsing, derivation and the sync orchestration.

The core knows nothing about the CLI. Adapters (file patchers, manifest
reader) are called through plain functions with typed domain models.
"""
