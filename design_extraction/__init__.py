"""
Bounded-resource extraction of large design-document trees.
"""

__version__ = "0.1.0"
