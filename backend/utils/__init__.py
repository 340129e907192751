"""
Utilities package.

Provides helper functions used around the core algorithms.

Modules:
    geo: Distance re-export and coordinate text formatting
"""
