import pytest

from volume import row_scan
from volume.errors import OutOfRange
from volume.mask import CompressionMask
from volume.row_scan import (
    VECTOR_MIN_RUN,
    row_is_all_tag,
    row_is_all_unmarked,
    window_is_all_tag,
    window_is_all_unmarked,
)
from volume.voxel_grid import VoxelGrid

A = ord("A")
B = ord("B")


def _row_region(text):
    return VoxelGrid.from_flat(text, (1, 1, len(text))).region()


@pytest.mark.parametrize("length", [3, VECTOR_MIN_RUN, 4 * VECTOR_MIN_RUN + 5])
def test_uniform_rows(length):
    region = _row_region("A" * length)
    assert row_is_all_tag(region, 0, 0, 0, length, A)
    assert not row_is_all_tag(region, 0, 0, 0, length, B)


@pytest.mark.parametrize("length", [3, VECTOR_MIN_RUN, 4 * VECTOR_MIN_RUN + 5])
def test_single_mismatch_is_found_anywhere(length):
    for pos in (0, length // 2, length - 1):
        text = "A" * pos + "B" + "A" * (length - pos - 1)
        region = _row_region(text)
        assert not row_is_all_tag(region, 0, 0, 0, length, A)


def test_range_is_respected():
    region = _row_region("B" + "A" * 40 + "B")
    assert row_is_all_tag(region, 0, 0, 1, 41, A)
    assert not row_is_all_tag(region, 0, 0, 0, 41, A)
    assert not row_is_all_tag(region, 0, 0, 1, 42, A)


def test_zero_length_runs_are_vacuously_true():
    region = _row_region("AB")
    mask = CompressionMask(region.extents)
    mask.mark_range(0, 1, 0, 1, 0, 2)
    assert row_is_all_tag(region, 0, 0, 1, 1, A)
    assert row_is_all_unmarked(mask, 0, 0, 2, 2)
    assert window_is_all_tag(region, 0, 1, 0, 0, 0, 2, A)


def test_rows_outside_region_fail():
    region = _row_region("AAAA")
    mask = CompressionMask(region.extents)
    with pytest.raises(OutOfRange):
        row_is_all_tag(region, 0, 1, 0, 1, A)
    with pytest.raises(OutOfRange):
        row_is_all_tag(region, 0, 0, 2, 5, A)
    with pytest.raises(OutOfRange):
        row_is_all_unmarked(mask, 1, 0, 0, 1)


@pytest.mark.parametrize("length", [5, 3 * VECTOR_MIN_RUN])
def test_unmarked_rows(length):
    mask = CompressionMask((1, 2, length))
    assert row_is_all_unmarked(mask, 0, 0, 0, length)
    mask.mark_range(0, 1, 1, 2, length - 1, length)
    assert row_is_all_unmarked(mask, 0, 0, 0, length)
    assert not row_is_all_unmarked(mask, 0, 1, 0, length)
    assert row_is_all_unmarked(mask, 0, 1, 0, length - 1)


def test_scalar_and_vector_paths_agree(monkeypatch):
    grid = VoxelGrid.from_flat("AAAB" * 12, (2, 3, 8))
    region = grid.region()
    mask = CompressionMask(region.extents)
    mask.mark_range(1, 2, 2, 3, 7, 8)
    boxes = [
        (0, 2, 0, 3, 0, 3),
        (0, 2, 0, 3, 0, 4),
        (0, 1, 0, 1, 4, 7),
        (1, 2, 0, 3, 0, 8),
        (0, 2, 0, 2, 0, 8),
    ]
    expected = [
        (window_is_all_tag(region, *box, A), window_is_all_unmarked(mask, *box))
        for box in boxes
    ]
    monkeypatch.setattr(row_scan, "VECTOR_MIN_RUN", 1)
    vector = [
        (window_is_all_tag(region, *box, A), window_is_all_unmarked(mask, *box))
        for box in boxes
    ]
    monkeypatch.setattr(row_scan, "VECTOR_MIN_RUN", 10_000)
    scalar = [
        (window_is_all_tag(region, *box, A), window_is_all_unmarked(mask, *box))
        for box in boxes
    ]
    assert expected == vector == scalar
    assert expected[0] == (True, True)
    assert expected[1][0] is False
    assert expected[3][1] is False
    assert expected[4][1] is True


@pytest.mark.parametrize("length", [3, 4 * VECTOR_MIN_RUN])
def test_character_tags_match_codes(length):
    region = _row_region("A" * length)
    assert row_is_all_tag(region, 0, 0, 0, length, "A")
    assert not row_is_all_tag(region, 0, 0, 0, length, "B")
    assert window_is_all_tag(region, 0, 1, 0, 1, 0, length, "A")
    assert window_is_all_tag(region, 0, 1, 0, 1, 0, length, b"A")


def test_small_windows_outside_region_fail():
    region = _row_region("AAAA")
    mask = CompressionMask(region.extents)
    with pytest.raises(OutOfRange):
        window_is_all_tag(region, 5, 5, 0, 9, 0, 9, A)
    with pytest.raises(OutOfRange):
        window_is_all_unmarked(mask, 5, 5, 0, 9, 0, 9)
    with pytest.raises(OutOfRange):
        window_is_all_tag(region, 0, 1, 0, 1, 3, 5, A)
