"""cap-sync-version: sync a package version into Android and iOS project files."""

__version__ = "2.1.0"
