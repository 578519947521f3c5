"""Utilities for Plex Voice."""
