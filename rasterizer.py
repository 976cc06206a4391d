# rasterizer.py
"""
Pixel-buffer drawing primitives.

All primitives write into a frame view: a NumPy uint8 array of shape
(height, width, 4) in RGBA order that aliases the display's raw buffer.
Pixel (x, y) is the pixel whose coordinate is (col, row); coverage tests
use integer pixel coordinates.
"""
import math

import numpy as np
from numba import jit

from constants import BYTES_PER_PIXEL
from geometry import Disk

# --- Data Contracts ---
#
# frame_view(buffer, width, height) -> np.ndarray:
#   - Inputs: a writable bytes-like object of exactly width*height*4 bytes.
#   - Outputs: a (height, width, 4) uint8 view sharing memory with buffer.
#   - Invariants: raises ValueError on a size mismatch; never copies.
#
# clear / fill_disk / fill_disks / plot_pixel / plot_pixels:
#   - Side Effects: mutate the frame in place. Writes outside the frame
#     are dropped silently.
#
# map_range(value, from_low, from_high, to_low, to_high):
#   - Precondition: from_high != from_low. Not checked.
#   - Accepts floats or NumPy arrays.


def frame_view(buffer, width: int, height: int) -> np.ndarray:
    """Wraps a raw RGBA buffer as a (height, width, 4) array without copying."""
    expected = width * height * BYTES_PER_PIXEL
    frame = np.frombuffer(buffer, dtype=np.uint8)
    if frame.size != expected:
        raise ValueError(
            f"Frame buffer holds {frame.size} bytes, expected {expected} "
            f"for a {width}x{height} RGBA frame."
        )
    if not frame.flags.writeable:
        raise ValueError("Frame buffer must be writable.")
    return frame.reshape(height, width, BYTES_PER_PIXEL)


def _as_color(color) -> np.ndarray:
    return np.asarray(color, dtype=np.uint8).reshape(BYTES_PER_PIXEL)


def clear(frame: np.ndarray, color) -> None:
    frame[:, :] = _as_color(color)


def plot_pixel(frame: np.ndarray, x: int, y: int, color) -> None:
    height, width = frame.shape[:2]
    if 0 <= x < width and 0 <= y < height:
        frame[y, x] = _as_color(color)


@jit(nopython=True)
def _fill_disk_numba(frame, center_x, center_y, radius, color):
    """
    Numba-jitted disk fill. Returns the number of pixels written.

    Falls back to the single rounded center pixel when no pixel of the
    bounding box is covered, so sub-pixel disks stay visible.
    """
    height = frame.shape[0]
    width = frame.shape[1]
    radius_sq = radius * radius

    row_start = max(0, int(math.floor(center_y - radius)))
    row_end = min(height, int(math.ceil(center_y + radius)))
    col_start = max(0, int(math.floor(center_x - radius)))
    col_end = min(width, int(math.ceil(center_x + radius)))

    count = 0
    for row in range(row_start, row_end):
        dy = row - center_y
        for col in range(col_start, col_end):
            dx = col - center_x
            if dx * dx + dy * dy < radius_sq:
                for c in range(4):
                    frame[row, col, c] = color[c]
                count += 1

    if count == 0:
        x = int(math.floor(center_x + 0.5))
        y = int(math.floor(center_y + 0.5))
        if 0 <= x < width and 0 <= y < height:
            for c in range(4):
                frame[y, x, c] = color[c]
            count = 1
    return count


@jit(nopython=True)
def _fill_disks_numba(frame, centers, radii, color):
    total = 0
    for i in range(centers.shape[0]):
        total += _fill_disk_numba(frame, centers[i, 0], centers[i, 1], radii[i], color)
    return total


def fill_disk(frame: np.ndarray, disk: Disk, color) -> int:
    return _fill_disk_numba(frame, float(disk.center.x), float(disk.center.y),
                            float(disk.radius), _as_color(color))


def fill_disks(frame: np.ndarray, centers: np.ndarray, radii: np.ndarray, color) -> int:
    """Fills many disks of one color, in index order; later disks paint over earlier ones."""
    if centers.shape[0] == 0:
        return 0
    return _fill_disks_numba(frame, centers, radii, _as_color(color))


def plot_pixels(frame: np.ndarray, xs: np.ndarray, ys: np.ndarray, colors: np.ndarray) -> None:
    """
    Vectorized plot_pixel. `colors` is an (N, 4) uint8 array, one color per
    point. Points outside the frame are dropped.
    """
    height, width = frame.shape[:2]
    xs = np.asarray(xs, dtype=np.int64)
    ys = np.asarray(ys, dtype=np.int64)
    in_bounds = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
    frame[ys[in_bounds], xs[in_bounds]] = colors[in_bounds]


def map_range(value, from_low, from_high, to_low, to_high):
    return (value - from_low) / (from_high - from_low) * (to_high - to_low) + to_low


def round_half_up(value):
    """Rounds to the nearest integer with ties going up: 127.5 -> 128."""
    return np.floor(np.asarray(value, dtype=np.float64) + 0.5)


def to_channel(value):
    """Rounds a mapped value and clamps it into an 8-bit color channel."""
    channel = np.clip(round_half_up(value), 0, 255).astype(np.uint8)
    if channel.ndim == 0:
        return int(channel)
    return channel
