from .treemap_layout import (
    MIN_WEIGHT,
    PlacedItem,
    Rect,
    SectorCluster,
    TreemapItem,
    TreemapLayoutError,
    calculate_treemap,
    layout,
    layout_clusters,
    squarify,
)
from .sectors import MarketSector, classify
from .sizing import Quote, SizeStrategy, items_from_frame, items_from_quotes
from .heatmap import HeatmapTile, build_heatmap, hit_test, sector_labels, sector_summaries
from .config import HeatmapConfig, load_config, save_config
from .log import get_logger, setup_logging

__version__ = "0.1.0"
