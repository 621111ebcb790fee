"""Data models for feedwatch."""

from .article import Article

__all__ = ["Article"]
