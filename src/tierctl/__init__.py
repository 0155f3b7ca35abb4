"""tierctl: tiered installation and health verification of cluster tooling."""

__version__ = "0.1.0"
