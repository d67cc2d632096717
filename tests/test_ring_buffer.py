import numpy as np
import pytest

from lufs_gain.meter.ring_buffer import FrameRingBuffer


def _column(values):
    return np.asarray(values, dtype=np.float64).reshape(-1, 1)


def test_write_wraps_and_reads_head_and_tail_segments():
    ring = FrameRingBuffer(5, 1)
    ring.write(_column([1, 2, 3, 4]))
    ring.write(_column([5, 6, 7]))

    assert ring.write_index == 2
    # Trailing four frames are 4, 5, 6, 7.
    assert ring.sum_of_squares(4)[0] == pytest.approx(16 + 25 + 36 + 49)


def test_window_without_wrap_reads_contiguous_frames():
    ring = FrameRingBuffer(8, 2)
    ring.write(np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]))

    np.testing.assert_allclose(ring.sum_of_squares(2), [9 + 25, 16 + 36])


def test_oversized_write_keeps_only_newest_frames_in_order():
    ring = FrameRingBuffer(4, 1)
    ring.write(_column([1]))
    ring.write(_column([2, 3, 4, 5, 6, 7]))

    assert ring.write_index == 3
    assert ring.sum_of_squares(1)[0] == pytest.approx(49)
    assert ring.sum_of_squares(4)[0] == pytest.approx(16 + 25 + 36 + 49)


def test_window_larger_than_capacity_is_rejected():
    ring = FrameRingBuffer(4, 1)

    with pytest.raises(ValueError):
        ring.sum_of_squares(5)


def test_clear_zeroes_data_and_cursor():
    ring = FrameRingBuffer(3, 1)
    ring.write(_column([1, 2]))
    ring.clear()

    assert ring.write_index == 0
    assert ring.sum_of_squares(3)[0] == 0.0
