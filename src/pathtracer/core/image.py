"""Colors and the output image buffer.

Colors are unitless RGB triples. They are combined by addition (accumulating
samples), component-wise multiplication (attenuation) and division by a
scalar (averaging). Values are not clamped: out-of-range channels are only
quantized away when an image is written out.

The Image is a fixed-size raster with its origin in the top-left corner,
stored as a NumPy array of shape (height, width, 3) so that it can be handed
directly to the export functions and filled by the parallel backend.

Example:
    >>> from pathtracer.core.image import Color, Image
    >>> image = Image(4, 2)
    >>> image[0, 1] = Color(1.0, 0.5, 0.0)
    >>> image[0, 1]
    Color(r=1.0, g=0.5, b=0.0)
    >>> len(list(image.rows()))
    2
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt


@dataclass(frozen=True, slots=True)
class Color:
    """An RGB radiance or attenuation value.

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
    """

    r: float
    g: float
    b: float

    @staticmethod
    def black() -> Color:
        return Color(0.0, 0.0, 0.0)

    def __add__(self, other: Color) -> Color:
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __mul__(self, other: Color | float) -> Color:
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b)
        return Color(self.r * other, self.g * other, self.b * other)

    def __rmul__(self, other: float) -> Color:
        return self.__mul__(other)

    def __truediv__(self, scalar: float) -> Color:
        return Color(self.r / scalar, self.g / scalar, self.b / scalar)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


class Image:
    """A two-dimensional grid of colors with its origin in the top-left corner.

    The shape is fixed at construction. Pixels are addressed as
    ``image[row, column]``; ``image[row]`` returns a writable view of one row
    as an array of shape (width, 3).

    Attributes:
        width: Number of columns.
        height: Number of rows.
    """

    def __init__(self, width: int, height: int) -> None:
        """Create a black image.

        Args:
            width: Number of columns (at least 1).
            height: Number of rows (at least 1).

        Raises:
            ValueError: If either dimension is smaller than 1.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._pixels = np.zeros((height, width, 3), dtype=np.float32)

    @classmethod
    def from_array(cls, pixels: npt.ArrayLike) -> Image:
        """Build an image from an array of shape (height, width, 3)."""
        array = np.asarray(pixels, dtype=np.float32)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected an array of shape (height, width, 3), got {array.shape}")
        image = cls(array.shape[1], array.shape[0])
        image._pixels[...] = array
        return image

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def pixels(self) -> npt.NDArray[np.float32]:
        """The underlying (height, width, 3) buffer, shared, not copied."""
        return self._pixels

    def _check_cell(self, row: int, column: int) -> None:
        if not (0 <= row < self._height and 0 <= column < self._width):
            raise IndexError(
                f"Pixel ({row}, {column}) is outside a {self._width}x{self._height} image"
            )

    def __getitem__(self, key):
        if isinstance(key, tuple):
            row, column = key
            self._check_cell(row, column)
            r, g, b = self._pixels[row, column]
            return Color(float(r), float(g), float(b))
        if not 0 <= key < self._height:
            raise IndexError(f"Row {key} is outside an image of height {self._height}")
        return self._pixels[key]

    def __setitem__(self, key: tuple[int, int], color: Color) -> None:
        row, column = key
        self._check_cell(row, column)
        self._pixels[row, column] = color.as_tuple()

    def rows(self) -> Iterator[npt.NDArray[np.float32]]:
        """Iterate over the rows of the image, top to bottom."""
        yield from self._pixels

    def __iter__(self) -> Iterator[npt.NDArray[np.float32]]:
        return self.rows()

    def __len__(self) -> int:
        return self._height

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Return a copy of the image as a (height, width, 3) float32 array."""
        return self._pixels.copy()

    def __repr__(self) -> str:
        return f"Image(width={self._width}, height={self._height})"
