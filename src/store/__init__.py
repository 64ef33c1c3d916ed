"""Storage and persistence layer.

This module keeps named key/value storages resident in memory and
persists each one wholesale to a single backing file.
"""
