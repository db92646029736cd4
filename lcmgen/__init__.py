"""LCM message type generator.

Compiles LCM schema documents into Python, Rust and Go message types with a
shared binary encoding and structural fingerprints.
"""

__version__ = "0.1.0"
