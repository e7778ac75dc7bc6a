"""Azeroth Bug Tracker - bug reports, feature requests and code changes for Bungee x Astro."""

__version__ = "1.0.0"
