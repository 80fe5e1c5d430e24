"""gvt - a tiny local version tracker for a working directory.

Keeps every version as a full copy of the tracked files, with a linear
history and checkout of any earlier version.
"""

__version__ = "1.0.0"
__author__ = "gvt contributors"
