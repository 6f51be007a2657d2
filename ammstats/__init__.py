"""Automated market maker pair statistics with decimal-safe persistence."""
