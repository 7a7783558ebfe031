"""Camera module for view and ray generation.

Components:
    thin_lens: Look-at camera with a thin lens, focus distance and a
        circular or polygonal aperture

Ray generation uses normalized image coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image
"""

from .thin_lens import Camera

__all__ = ["Camera"]
