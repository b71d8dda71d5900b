"""Subscribarr: sync recent uploads from your YouTube subscriptions into a playlist."""

__version__ = "0.1.0"
