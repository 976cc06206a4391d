import math

import numpy as np
import pytest

import rasterizer
from geometry import Disk, Vector2

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


@pytest.fixture
def frame():
    buffer = bytearray(100 * 80 * 4)
    view = rasterizer.frame_view(buffer, 100, 80)
    rasterizer.clear(view, BLACK)
    return view


def lit(frame, color=WHITE):
    return int(np.all(frame == np.array(color, dtype=np.uint8), axis=2).sum())


def test_frame_view_aliases_buffer():
    buffer = bytearray(4 * 3 * 4)
    view = rasterizer.frame_view(buffer, 4, 3)
    rasterizer.plot_pixel(view, 1, 2, (1, 2, 3, 4))
    index = (2 * 4 + 1) * 4
    assert bytes(buffer[index:index + 4]) == bytes([1, 2, 3, 4])


def test_frame_view_rejects_wrong_size():
    with pytest.raises(ValueError):
        rasterizer.frame_view(bytearray(10), 4, 3)


def test_frame_view_rejects_read_only_buffer():
    with pytest.raises(ValueError):
        rasterizer.frame_view(bytes(4 * 3 * 4), 4, 3)


def test_clear_overwrites_every_pixel(frame):
    rasterizer.clear(frame, (9, 8, 7, 6))
    assert lit(frame, (9, 8, 7, 6)) == 100 * 80


def test_fill_disk_area_approximates_pi_r_squared(frame):
    count = rasterizer.fill_disk(frame, Disk(Vector2(50.0, 40.0), 20.0), WHITE)
    assert count == lit(frame)
    assert count == pytest.approx(math.pi * 20.0 ** 2, rel=0.03)


def test_fill_disk_is_clipped_to_frame(frame):
    count = rasterizer.fill_disk(frame, Disk(Vector2(0.0, 0.0), 10.0), WHITE)
    assert count == lit(frame)
    assert count == pytest.approx(math.pi * 100.0 / 4.0, rel=0.15)


def test_sub_pixel_disk_lights_exactly_one_pixel(frame):
    count = rasterizer.fill_disk(frame, Disk(Vector2(10.4, 10.7), 0.3), WHITE)
    assert count == 1
    assert lit(frame) == 1
    assert tuple(frame[11, 10]) == WHITE


def test_sub_pixel_disk_off_screen_draws_nothing(frame):
    count = rasterizer.fill_disk(frame, Disk(Vector2(-5.0, 500.0), 0.3), WHITE)
    assert count == 0
    assert lit(frame) == 0


def test_plot_pixel_out_of_bounds_is_ignored(frame):
    rasterizer.plot_pixel(frame, 100, 0, WHITE)
    rasterizer.plot_pixel(frame, -1, 5, WHITE)
    rasterizer.plot_pixel(frame, 3, 80, WHITE)
    assert lit(frame) == 0
    rasterizer.plot_pixel(frame, 99, 79, WHITE)
    assert tuple(frame[79, 99]) == WHITE


def test_fill_disks_later_disks_paint_over_earlier(frame):
    centers = np.array([[20.0, 20.0], [22.0, 20.0]])
    radii = np.array([5.0, 5.0])
    rasterizer.fill_disks(frame, centers, radii, WHITE)
    rasterizer.fill_disk(frame, Disk(Vector2(22.0, 20.0), 5.0), (1, 1, 1, 255))
    assert tuple(frame[20, 22]) == (1, 1, 1, 255)
    assert tuple(frame[20, 16]) == WHITE


def test_plot_pixels_drops_out_of_bounds(frame):
    xs = np.array([0, 5, 100, -3])
    ys = np.array([0, 79, 2, 2])
    colors = np.tile(np.array(WHITE, dtype=np.uint8), (4, 1))
    rasterizer.plot_pixels(frame, xs, ys, colors)
    assert lit(frame) == 2


def test_map_range_round_trips():
    value = 37.25
    there = rasterizer.map_range(value, -10.0, 90.0, 100.0, 255.0)
    back = rasterizer.map_range(there, 100.0, 255.0, -10.0, 90.0)
    assert back == pytest.approx(value)


def test_map_range_on_arrays():
    values = np.array([0.0, 200.0, 400.0])
    mapped = rasterizer.map_range(values, 0.0, 400.0, 0.0, 255.0)
    assert mapped.tolist() == pytest.approx([0.0, 127.5, 255.0])


def test_half_way_channel_rounds_up():
    assert rasterizer.map_range(127.5, 0.0, 255.0, 0.0, 255.0) == 127.5
    assert rasterizer.to_channel(127.5) == 128
    assert rasterizer.to_channel(126.5) == 127


def test_to_channel_clamps():
    assert rasterizer.to_channel(-12.0) == 0
    assert rasterizer.to_channel(300.0) == 255
    channels = rasterizer.to_channel(np.array([-1.0, 0.4, 254.6, 999.0]))
    assert channels.dtype == np.uint8
    assert channels.tolist() == [0, 0, 255, 255]
