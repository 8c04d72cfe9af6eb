"""Block storage layer.

This package persists JSON records into per-dataset block files.
It owns decoding, decryption, and corruption quarantine on reads.
"""
