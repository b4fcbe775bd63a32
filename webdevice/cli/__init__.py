"""Command line interface for webdevice."""
