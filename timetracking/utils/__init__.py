"""
Shared utilities - batching, datetime helpers, rounding and error handling.
"""
