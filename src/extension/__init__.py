"""Host call adapter.

This module turns textual function calls from the game engine into storage
pool operations and writes rendered results into fixed-size buffers.
"""
