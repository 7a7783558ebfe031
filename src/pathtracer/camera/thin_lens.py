"""Thin-lens camera model for perspective projection with depth of field.

This module implements a camera that generates primary rays for rendering.
The camera supports:
- Look-at positioning (origin, target, up)
- Focal length given directly or derived from a diagonal angle of view
- Depth of field controlled by an f-stop and a focus distance
- Circular or polygonal (N-blade) apertures

The camera builds an orthonormal basis (right, up, forward) from the view
parameters:
- forward: points from target toward origin (opposite view direction)
- right: points right in the image plane
- up: points up in the image plane

The image plane is placed at the focus distance. Its extents are the viewport
scaled by ``focus_distance / focal_length``, so the angle of view does not
depend on where the camera focuses.

Example:
    >>> import numpy as np
    >>> from pathtracer.camera.thin_lens import Camera
    >>> from pathtracer.core.vector import Point3, Vector3
    >>>
    >>> camera = Camera.from_field_of_view(
    ...     origin=Point3(0.0, 0.0, 3.0),
    ...     target=Point3(0.0, 0.0, 0.0),
    ...     up=Vector3(0.0, 1.0, 0.0),
    ...     angle_of_view=40.0,
    ...     viewport=(2.0, 1.0),
    ...     f_stop=8.0,
    ... )
    >>> ray = camera.ray(0.5, 0.5, np.random.default_rng(0))
"""

from __future__ import annotations

import math

import numpy as np

from pathtracer.core.ray import (
    Ray,
    polygon_radius_scale,
    random_in_polygon,
    random_in_unit_disk,
)
from pathtracer.core.vector import Point3, Vector3


class Camera:
    """A look-at camera with a thin lens.

    Attributes:
        origin: Camera position in world space.
        corner: Lower-left corner of the image plane.
        horizontal: Full width of the image plane, pointing right.
        vertical: Full height of the image plane, pointing up.
        right: Unit vector to the right of the view direction.
        up: Unit vector up in the image plane.
        forward: Unit vector pointing backward, from target to origin.
        lens_radius: Radius of the lens; 0 for a pinhole.
        blades: Number of aperture blades; 0 for a circular aperture.
    """

    def __init__(
        self,
        origin: Point3,
        target: Point3,
        up: Vector3,
        focal_length: float,
        viewport: tuple[float, float],
        f_stop: float | None = None,
        blades: int = 0,
        focus_distance: float | None = None,
    ) -> None:
        """Create a camera.

        Args:
            origin: Camera position.
            target: Point the camera looks at.
            up: World up direction; must not be parallel to the view direction.
            focal_length: Distance from the lens to the viewport.
            viewport: (width, height) of the viewport at the focal length.
            f_stop: Ratio of focal length to aperture diameter. None for a
                pinhole camera without depth of field.
            blades: 0 for a circular aperture, otherwise the number of sides
                of a regular polygonal aperture (at least 3).
            focus_distance: Distance to the plane of sharp focus. Defaults to
                the distance from origin to target.

        Raises:
            ValueError: If any parameter is out of range or the basis is
                degenerate.
        """
        viewport_width, viewport_height = viewport
        if focal_length <= 0.0:
            raise ValueError(f"Focal length = {focal_length} must be positive")
        if viewport_width <= 0.0 or viewport_height <= 0.0:
            raise ValueError(f"Viewport {viewport} must have positive extents")
        if f_stop is not None and f_stop <= 0.0:
            raise ValueError(f"F-stop = {f_stop} must be positive")
        if blades < 0 or blades in (1, 2):
            raise ValueError(f"Blades = {blades} must be 0 (circular) or at least 3")

        view = origin - target
        if focus_distance is None:
            focus_distance = view.norm()
        if not focus_distance > 0.0:
            raise ValueError(f"Focus distance = {focus_distance} must be positive")

        forward = view.normalize()
        right = up.cross(forward)
        if right.is_near_zero() or math.isnan(right.norm()):
            raise ValueError("Camera up vector must not be parallel to the view direction")
        right = right.normalize()
        cam_up = forward.cross(right)

        scale = focus_distance / focal_length
        self.origin = origin
        self.right = right
        self.up = cam_up
        self.forward = forward
        self.horizontal = right * (viewport_width * scale)
        self.vertical = cam_up * (viewport_height * scale)
        self.corner = (
            origin - self.horizontal / 2.0 - self.vertical / 2.0 - forward * focus_distance
        )
        self.focal_length = focal_length
        self.focus_distance = focus_distance
        self.blades = blades

        lens_radius = 0.0 if f_stop is None else focal_length / (2.0 * f_stop)
        if blades >= 3:
            lens_radius *= polygon_radius_scale(blades)
        self.lens_radius = lens_radius

    @classmethod
    def from_field_of_view(
        cls,
        origin: Point3,
        target: Point3,
        up: Vector3,
        angle_of_view: float,
        viewport: tuple[float, float],
        f_stop: float | None = None,
        blades: int = 0,
        focus_distance: float | None = None,
    ) -> Camera:
        """Create a camera from a diagonal angle of view in degrees.

        The focal length is chosen so that the viewport diagonal subtends
        ``angle_of_view``: ``f = (diagonal / 2) / tan(angle_of_view / 2)``.

        Raises:
            ValueError: If the angle is not in (0, 180) degrees, or for any
                reason listed in ``Camera.__init__``.
        """
        if not 0.0 < angle_of_view < 180.0:
            raise ValueError(f"Angle of view = {angle_of_view} must be in (0, 180) degrees")
        diagonal = math.hypot(viewport[0], viewport[1])
        focal_length = (diagonal / 2.0) / math.tan(math.radians(angle_of_view) / 2.0)
        return cls(origin, target, up, focal_length, viewport, f_stop, blades, focus_distance)

    def _lens_offset(self, rng: np.random.Generator) -> Vector3:
        if self.blades >= 3:
            x, y = random_in_polygon(rng, self.blades)
        else:
            x, y = random_in_unit_disk(rng)
        return (self.right * x + self.up * y) * self.lens_radius

    def ray(self, u: float, v: float, rng: np.random.Generator | None = None) -> Ray:
        """Generate a ray through normalized image coordinates (u, v).

        Args:
            u: Horizontal coordinate, 0 at the left edge and 1 at the right.
            v: Vertical coordinate, 0 at the bottom edge and 1 at the top.
            rng: Random source for lens sampling. Without one (or with a
                pinhole lens) every ray starts at the camera origin.

        Returns:
            A ray through the point (u, v) of the focal plane.
        """
        target = self.corner + self.horizontal * u + self.vertical * v
        origin = self.origin
        if rng is not None and self.lens_radius > 0.0:
            origin = origin + self._lens_offset(rng)
        return Ray(origin, target - origin)

    def __repr__(self) -> str:
        return (
            f"Camera(origin={self.origin!r}, lens_radius={self.lens_radius}, "
            f"blades={self.blades})"
        )
