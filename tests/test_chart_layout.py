import pytest

from services.chart_layout import ChartBounds, compute_layout

BOUNDS = ChartBounds(x=50, y=300, width=500, height=200)


def _series(n, fill=0):
    return [[fill] * n for _ in range(5)]


def test_group_spacing_for_twelve_buckets():
    geometry = compute_layout(BOUNDS, _series(12))
    assert geometry.group_width == pytest.approx(500 * 0.8 / 12)
    assert geometry.space_between == pytest.approx(100 / 13)
    assert geometry.bar_width == pytest.approx(geometry.group_width / 6)
    assert geometry.group_offsets[0] == pytest.approx(50 + 100 / 13)
    # groups plus gaps fill the chart exactly
    last_right = geometry.group_offsets[-1] + geometry.group_width
    assert last_right + geometry.space_between == pytest.approx(BOUNDS.x + BOUNDS.width)


def test_bar_heights_scale_to_max_count():
    series = _series(3)
    series[1] = [10, 5, 0]
    series[4] = [0, 0, 2]
    geometry = compute_layout(BOUNDS, series)

    assert geometry.max_count == 10
    tallest = next(b for b in geometry.bars if b.series_index == 1 and b.bucket_index == 0)
    half = next(b for b in geometry.bars if b.series_index == 1 and b.bucket_index == 1)
    assert tallest.height == pytest.approx(180)
    assert half.height == pytest.approx(90)
    assert tallest.y + tallest.height == pytest.approx(BOUNDS.bottom)


def test_bars_sit_side_by_side_within_group():
    geometry = compute_layout(BOUNDS, _series(3, fill=1))
    group = sorted((b for b in geometry.bars if b.bucket_index == 2), key=lambda b: b.series_index)
    assert len(group) == 5
    for prev, bar in zip(group, group[1:]):
        assert bar.x - prev.x == pytest.approx(geometry.bar_width)
    assert group[0].x == pytest.approx(geometry.group_offsets[2])


def test_all_zero_counts_render_flat():
    geometry = compute_layout(BOUNDS, _series(31))
    assert geometry.max_count == 1
    assert len(geometry.bars) == 5 * 31
    assert all(b.height == 0 for b in geometry.bars)


def test_label_centers_follow_groups():
    geometry = compute_layout(BOUNDS, _series(4))
    for offset, center in zip(geometry.group_offsets, geometry.label_centers):
        assert center == pytest.approx(offset + geometry.group_width / 2)


def test_empty_bucket_set_is_rejected():
    with pytest.raises(ValueError):
        compute_layout(BOUNDS, _series(0))
