"""
Heatmap tiles on top of the treemap layout.

build_heatmap is what a view calls on every resize or quote refresh; the
other helpers answer the questions a renderer asks about the result
(where to put sector labels, which tile is under the cursor, how to snap
a tile to whole pixels).
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .colors import heatmap_color
from .config import HeatmapConfig
from .log import get_logger
from .sectors import SECTOR_BY_TICKER
from .sizing import Quote, items_from_quotes
from .treemap_layout import PlacedItem, Rect, SectorCluster, layout_clusters

log = get_logger(__name__, component="heatmap")

LABEL_OFFSET = (6.0, 10.0)


@dataclass(frozen=True)
class HeatmapTile:
    symbol: str
    rect: Rect
    change_pct: float
    sector: str
    color: str


@dataclass(frozen=True)
class SectorSummary:
    sector: str
    rect: Rect
    weight: float
    count: int
    avg_change: float


@dataclass(frozen=True)
class SectorLabel:
    sector: str
    x: float
    y: float


def _sector_name(symbol: str, default: str) -> str:
    sector = SECTOR_BY_TICKER.get(symbol.strip().upper())
    return sector.value if sector is not None else default


def _change_of(placed: PlacedItem) -> float:
    if isinstance(placed.payload, (int, float)):
        return float(placed.payload)
    return 0.0


def build_clusters(
    quotes: Iterable[Quote],
    width: float,
    height: float,
    strategy=None,
    holdings: Optional[Mapping[str, Optional[float]]] = None,
    config: Optional[HeatmapConfig] = None,
) -> List[SectorCluster]:
    config = config or HeatmapConfig()
    items = items_from_quotes(
        quotes,
        strategy if strategy is not None else config.size_strategy,
        holdings,
        classifier=lambda symbol: _sector_name(symbol, config.default_sector),
    )
    return layout_clusters(items, Rect(0.0, 0.0, width, height), min_weight=config.min_weight)


def tiles_from_clusters(clusters: Iterable[SectorCluster], config: Optional[HeatmapConfig] = None) -> List[HeatmapTile]:
    config = config or HeatmapConfig()
    tiles = []
    for cluster in clusters:
        for placed in cluster.items:
            change = _change_of(placed)
            tiles.append(
                HeatmapTile(
                    symbol=placed.identifier,
                    rect=placed.rect,
                    change_pct=change,
                    sector=placed.category,
                    color=heatmap_color(change, config.color_max_pct),
                )
            )
    return tiles


def build_heatmap(
    quotes: Iterable[Quote],
    width: float,
    height: float,
    strategy=None,
    holdings: Optional[Mapping[str, Optional[float]]] = None,
    config: Optional[HeatmapConfig] = None,
) -> List[HeatmapTile]:
    """
    Lay out quotes in a width x height canvas and color each tile.

    strategy defaults to config.size_strategy. An empty canvas or no quotes
    gives no tiles.
    """
    clusters = build_clusters(quotes, width, height, strategy, holdings, config)
    tiles = tiles_from_clusters(clusters, config)
    log.debug("heatmap_built", tiles=len(tiles), sectors=len(clusters), width=width, height=height)
    return tiles


def sector_summaries(clusters: Iterable[SectorCluster]) -> List[SectorSummary]:
    """Per sector totals; avg_change is weighted by tile area."""
    summaries = []
    for cluster in clusters:
        total_area = sum(p.rect.area for p in cluster.items)
        if total_area > 0:
            avg = sum(_change_of(p) * p.rect.area for p in cluster.items) / total_area
        elif cluster.items:
            avg = sum(_change_of(p) for p in cluster.items) / len(cluster.items)
        else:
            avg = 0.0
        summaries.append(
            SectorSummary(
                sector=cluster.category,
                rect=cluster.rect,
                weight=cluster.weight,
                count=len(cluster.items),
                avg_change=avg,
            )
        )
    return summaries


def sector_labels(tiles: Sequence[HeatmapTile], min_area: float = 3000.0) -> List[SectorLabel]:
    """Label anchors at the top-left tile of every sector big enough to carry one."""
    by_sector: Dict[str, List[HeatmapTile]] = {}
    for tile in tiles:
        by_sector.setdefault(tile.sector, []).append(tile)

    labels = []
    for sector, members in by_sector.items():
        if sum(t.rect.area for t in members) <= min_area:
            continue
        first = min(members, key=lambda t: (t.rect.y, t.rect.x))
        labels.append(SectorLabel(sector, first.rect.x + LABEL_OFFSET[0], first.rect.y + LABEL_OFFSET[1]))
    return labels


def hit_test(tiles: Iterable[HeatmapTile], px: float, py: float) -> Optional[HeatmapTile]:
    return next((t for t in tiles if t.rect.contains(px, py)), None)


def drawable_rect(rect: Rect, inset: float = 1.5, min_size: float = 2.0) -> Optional[Rect]:
    frame = rect.inset(inset, inset)
    if frame.width <= min_size or frame.height <= min_size:
        return None
    return frame


def snap_to_pixels(rect: Rect) -> Tuple[int, int, int, int]:
    # w = round(x + w) - round(x), so neighbours keep sharing an edge
    ix, iy = round(rect.x), round(rect.y)
    return ix, iy, round(rect.max_x) - ix, round(rect.max_y) - iy


def to_relative(placed: Iterable[PlacedItem], within: Rect) -> Dict[str, Rect]:
    """
    Cache form of a layout: rects as 0-1 fractions of within, keyed by identifier.

    Identifiers are expected to be unique. When one repeats, the later
    placement wins and a warning is logged; cache a layout with repeated
    symbols by position instead.
    """
    if within.is_empty:
        return {}
    relative = {}
    for p in placed:
        if p.identifier in relative:
            log.warning("duplicate_identifier", identifier=p.identifier)
        relative[p.identifier] = Rect(
            (p.rect.x - within.x) / within.width,
            (p.rect.y - within.y) / within.height,
            p.rect.width / within.width,
            p.rect.height / within.height,
        )
    return relative


def from_relative(relative: Mapping[str, Rect], within: Rect) -> Dict[str, Rect]:
    return {
        identifier: Rect(
            within.x + r.x * within.width,
            within.y + r.y * within.height,
            r.width * within.width,
            r.height * within.height,
        )
        for identifier, r in relative.items()
    }
