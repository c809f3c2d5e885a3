"""Utility functions for the optimizer."""
