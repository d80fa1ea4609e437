"""Bundled usage and footer texts."""
