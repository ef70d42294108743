"""Semantic alignment analysis between web pages and AI-generated answers."""

__version__ = "0.1.0"
