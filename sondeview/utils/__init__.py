"""Utility modules for sondeview."""
