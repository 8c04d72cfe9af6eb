"""Model contract and storage envelope.

This package defines what a domain object must provide to be stored and
the versioned envelope that wraps it on insert.
"""
