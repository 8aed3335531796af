"""WebDAV request relay with reusable PROPFIND property presets."""

__version__ = "0.1.0"
