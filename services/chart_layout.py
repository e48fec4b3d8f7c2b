"""Bar chart geometry for the statistics report.

Coordinates use a top-left origin with y growing downward; the renderer
converts them to PDF space.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

BARS_AREA_RATIO = 0.8  # share of the width taken by bar groups
GROUP_SLOTS = 6  # five series plus one slot of padding
TOP_PADDING = 20  # tallest bar stops this far below the top of the chart


@dataclass(frozen=True)
class ChartBounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class Bar:
    series_index: int
    bucket_index: int
    x: float
    y: float
    width: float
    height: float
    count: int


@dataclass
class ChartGeometry:
    bounds: ChartBounds
    max_count: int
    group_width: float
    space_between: float
    bar_width: float
    group_offsets: List[float] = field(default_factory=list)
    label_centers: List[float] = field(default_factory=list)
    bars: List[Bar] = field(default_factory=list)


def compute_layout(bounds: ChartBounds, series: Sequence[Sequence[int]]) -> ChartGeometry:
    n = len(series[0]) if series else 0
    if n == 0:
        raise ValueError("chart needs at least one bucket")

    max_count = max([1] + [c for s in series for c in s])
    bars_width = bounds.width * BARS_AREA_RATIO
    group_width = bars_width / n
    space_between = (bounds.width - bars_width) / (n + 1)
    bar_width = group_width / GROUP_SLOTS
    usable_height = bounds.height - TOP_PADDING

    group_offsets = [
        bounds.x + space_between * (i + 1) + group_width * i for i in range(n)
    ]

    bars = []
    for series_index, counts in enumerate(series):
        for i, count in enumerate(counts):
            height = (count / max_count) * usable_height
            bars.append(Bar(
                series_index=series_index,
                bucket_index=i,
                x=group_offsets[i] + bar_width * series_index,
                y=bounds.bottom - height,
                width=bar_width,
                height=height,
                count=count,
            ))

    return ChartGeometry(
        bounds=bounds,
        max_count=max_count,
        group_width=group_width,
        space_between=space_between,
        bar_width=bar_width,
        group_offsets=group_offsets,
        label_centers=[x + group_width / 2 for x in group_offsets],
        bars=bars,
    )
