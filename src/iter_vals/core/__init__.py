"""Core fragment types and exceptions for iter_vals."""
