"""Feedwatch - continuous RSS news scraper."""

__version__ = "1.0.0"
