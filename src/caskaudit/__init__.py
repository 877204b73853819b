"""caskaudit: pre-publication audit engine for cask manifests."""

__version__ = "0.1.0"
