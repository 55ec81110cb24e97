"""Confinerbaker - Bake camera confiner shapes for every view size.

Confinerbaker takes the closed 2D contours of a level boundary and a camera
aspect ratio, and precomputes a sequence of progressively shrunk polygons.
Each one is valid for a range of camera frustum heights, so the confining
shape for any view size can be fetched, or cheaply interpolated, at runtime.

Example:
    $ confinerbaker bake level.json --aspect 1.777

This will create level-baked.json with the trimmed list of confiner states.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
