#!/usr/bin/env python3
# mercator_image/version.py
"""
Version metadata for mercator-image.
"""

__version__ = "1.0.0"
__license__ = "LGPL-3.0-or-later"

def version_info() -> str:
    """Return human-readable version string."""
    return f"mercator-image v{__version__}"
