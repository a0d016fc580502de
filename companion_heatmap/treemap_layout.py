"""Squarified treemap layout with sector clustering.

Items are grouped by category, each category gets a cluster rectangle
proportional to its total weight, and the items of a category are then
squarified inside their cluster. Everything here is pure geometry: no
state survives a call, so the functions are safe to call from any thread.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .log import get_logger

log = get_logger(__name__, component="treemap-layout")

# Weights at or below this are clamped so every item still gets some area.
MIN_WEIGHT = 0.001

_SNAP_TOLERANCE = 1e-9


class TreemapLayoutError(RuntimeError):
    """Raised when the layout breaks one of its own invariants."""


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def aspect_ratio(self) -> float:
        """Long side over short side; infinite for a degenerate rect."""
        if self.is_empty:
            return float("inf")
        return max(self.width / self.height, self.height / self.width)

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.max_x and self.y <= py < self.max_y

    def inset(self, dx: float, dy: float) -> "Rect":
        return Rect(
            self.x + dx,
            self.y + dy,
            max(self.width - 2 * dx, 0.0),
            max(self.height - 2 * dy, 0.0),
        )

    def intersection_area(self, other: "Rect") -> float:
        w = min(self.max_x, other.max_x) - max(self.x, other.x)
        h = min(self.max_y, other.max_y) - max(self.y, other.y)
        if w <= 0 or h <= 0:
            return 0.0
        return w * h

    def union(self, other: "Rect") -> "Rect":
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Rect(x, y, max(self.max_x, other.max_x) - x, max(self.max_y, other.max_y) - y)


@dataclass(frozen=True)
class TreemapItem:
    identifier: str
    weight: float
    category: str
    payload: Any = None


@dataclass(frozen=True)
class PlacedItem:
    identifier: str
    rect: Rect
    category: str
    payload: Any = None


@dataclass
class SectorCluster:
    """One category's cluster rectangle and the items placed inside it."""

    category: str
    rect: Rect
    weight: float
    items: List[PlacedItem] = field(default_factory=list)


def clamp_weight(weight: float, min_weight: float = MIN_WEIGHT) -> float:
    if not (math.isfinite(min_weight) and min_weight > 0):
        raise ValueError(f"min_weight must be a positive finite number, got {min_weight!r}")
    # NaN fails every comparison, so it falls through to the clamp as well
    if not math.isfinite(weight):
        log.warning("non_finite_weight_clamped", weight=repr(weight), clamped_to=min_weight)
        return min_weight
    return weight if weight > min_weight else min_weight


def normalize_sizes(sizes: Sequence[float], total_area: float) -> List[float]:
    """Scale sizes so that they sum to total_area."""
    total_size = sum(sizes)
    if total_size <= 0:
        return []
    return [size * total_area / total_size for size in sizes]


def worst_ratio(row: Sequence[float], side: float) -> float:
    """
    Worst aspect ratio of a row of areas laid along a side of the given length.

    With thickness t = sum(row) / side every member has length a / t, so
    its ratio is max(t*t / a, a / t*t). The maximum over the row is reached
    at the smallest or the largest area.
    """
    if not row or side <= 0:
        return float("inf")
    row_area = sum(row)
    min_area = min(row)
    max_area = max(row)
    if row_area <= 0 or min_area <= 0:
        return float("inf")
    side2 = side * side
    return max((side2 * max_area) / (row_area * row_area), (row_area * row_area) / (side2 * min_area))


def layout_row(
    row: Sequence[float], remaining: Rect, vertical: bool, fill: bool = False
) -> Tuple[List[Rect], Rect]:
    """
    Place one row inside remaining and return (rects, new remaining).

    vertical: the row is a column against the left edge, members stacked
    along the height. Otherwise it is a band along the top edge, members
    side by side along the width.
    fill: the row holds the last unplaced areas, so it may snap onto the
    far edges of remaining to absorb rounding. Earlier rows never snap;
    a much smaller area still waiting must keep its sliver.
    """
    side = remaining.height if vertical else remaining.width
    extent = remaining.width if vertical else remaining.height
    row_area = sum(row)

    thickness = row_area / side
    if thickness > extent or (fill and math.isclose(thickness, extent, rel_tol=_SNAP_TOLERANCE)):
        thickness = extent

    rects = []
    offset = 0.0
    last = len(row) - 1
    for n, area in enumerate(row):
        length = area / thickness if thickness > 0 else 0.0
        room = max(side - offset, 0.0)
        if length > room or (fill and n == last and math.isclose(offset + length, side, rel_tol=_SNAP_TOLERANCE)):
            length = room
        if vertical:
            rects.append(Rect(remaining.x, remaining.y + offset, thickness, length))
        else:
            rects.append(Rect(remaining.x + offset, remaining.y, length, thickness))
        offset += length

    if vertical:
        remaining = Rect(remaining.x + thickness, remaining.y, max(remaining.width - thickness, 0.0), remaining.height)
    else:
        remaining = Rect(remaining.x, remaining.y + thickness, remaining.width, max(remaining.height - thickness, 0.0))
    return rects, remaining


def squarify(areas: Sequence[float], rect: Rect) -> List[Rect]:
    """
    Squarified treemap: fill rect greedily row by row.

    areas should already be scaled to rect.area and sorted large to small.
    The result has one rect per area, in input order. Areas that could not
    be placed because the remaining space collapsed get a zero-size rect.
    """
    count = len(areas)
    placed: List[Optional[Rect]] = [None] * count
    remaining = rect
    i = 0

    while i < count:
        vertical = remaining.width >= remaining.height
        side = remaining.height if vertical else remaining.width
        if side <= 0:
            break

        row = [areas[i]]
        best = worst_ratio(row, side)
        j = i + 1
        while j < count:
            candidate = row + [areas[j]]
            ratio = worst_ratio(candidate, side)
            if ratio > best:
                break
            row = candidate
            best = ratio
            j += 1

        row_rects, remaining = layout_row(row, remaining, vertical, fill=(j == count))
        placed[i:j] = row_rects
        i = j

    return [r if r is not None else Rect(remaining.x, remaining.y, 0.0, 0.0) for r in placed]


def _squarify_checked(areas: Sequence[float], rect: Rect) -> List[Rect]:
    rects = squarify(areas, rect)
    if len(rects) != len(areas):
        raise TreemapLayoutError(f"squarify returned {len(rects)} rects for {len(areas)} areas")
    return rects


def layout_clusters(
    items: Iterable[TreemapItem], within: Rect, min_weight: float = MIN_WEIGHT
) -> List[SectorCluster]:
    """
    Lay out items grouped by category and return one cluster per category.

    Clusters come largest first; ties keep the order in which the
    categories first appear. Inside a cluster items are likewise placed
    largest first, ties in input order.
    """
    items = list(items)
    if not items or within.width <= 0 or within.height <= 0:
        return []

    grouped = {}
    for item in items:
        grouped.setdefault(item.category, []).append((clamp_weight(item.weight, min_weight), item))

    totals = {category: sum(w for w, _ in members) for category, members in grouped.items()}
    grand_total = sum(totals.values())
    if grand_total <= 0:
        return []

    categories = sorted(totals, key=lambda c: -totals[c])
    sector_areas = normalize_sizes([totals[c] for c in categories], within.area)
    sector_rects = _squarify_checked(sector_areas, within)

    clusters = []
    for category, sector_rect in zip(categories, sector_rects):
        members = sorted(grouped[category], key=lambda m: -m[0])
        item_areas = normalize_sizes([w for w, _ in members], sector_rect.area)
        item_rects = _squarify_checked(item_areas, sector_rect)

        cluster = SectorCluster(category=category, rect=sector_rect, weight=totals[category])
        for (_, item), item_rect in zip(members, item_rects):
            cluster.items.append(PlacedItem(item.identifier, item_rect, item.category, item.payload))
        clusters.append(cluster)

    log.debug("treemap_layout", items=len(items), sectors=len(clusters), area=within.area)
    return clusters


def calculate_treemap(
    items: Iterable[TreemapItem], within: Rect, min_weight: float = MIN_WEIGHT
) -> List[PlacedItem]:
    """
    Place every item inside within.

    Returns one PlacedItem per input item; empty for empty input or a
    degenerate target rectangle. Callers should join results back by
    identifier rather than by position.
    """
    return [placed for cluster in layout_clusters(items, within, min_weight) for placed in cluster.items]


layout = calculate_treemap
