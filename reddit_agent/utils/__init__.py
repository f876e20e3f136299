"""Utility modules for the Reddit Agent application."""
