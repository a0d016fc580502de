"""
Turn quotes into treemap items.

A size strategy decides what drives tile area: every quote the same,
traded volume, or the notional value of the position held.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Mapping, Optional

import pandas as pd

from .sectors import classify
from .treemap_layout import TreemapItem

REQUIRED_COLUMNS = ("symbol", "last", "change_pct", "volume")

# shares assumed for a symbol that is not held (or held without a share count)
FALLBACK_SHARES = 100


class SizeStrategy(str, Enum):
    EQUAL = "equal"
    VOLUME = "volume"
    POSITION = "position"

    @property
    def label(self) -> str:
        return {"equal": "Equal Weight", "volume": "By Volume", "position": "By Position"}[self.value]

    @classmethod
    def parse(cls, value) -> "SizeStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"unknown size strategy {value!r}, expected one of {[s.value for s in cls]}"
            ) from None


@dataclass(frozen=True)
class Quote:
    symbol: str
    last: float
    change_pct: float
    volume: float = 0.0


def _sector_of(symbol: str) -> str:
    return classify(symbol).value


def size_value(quote: Quote, strategy, holdings: Optional[Mapping[str, Optional[float]]] = None) -> float:
    strategy = SizeStrategy.parse(strategy)
    if strategy is SizeStrategy.EQUAL:
        return 1.0
    if strategy is SizeStrategy.VOLUME:
        return float(quote.volume)
    shares = (holdings or {}).get(quote.symbol)
    if shares is None:
        return quote.last * FALLBACK_SHARES
    return shares * quote.last


def items_from_quotes(
    quotes: Iterable[Quote],
    strategy="equal",
    holdings: Optional[Mapping[str, Optional[float]]] = None,
    classifier: Callable[[str], str] = _sector_of,
) -> List[TreemapItem]:
    strategy = SizeStrategy.parse(strategy)
    return [
        TreemapItem(
            identifier=q.symbol,
            weight=size_value(q, strategy, holdings),
            category=classifier(q.symbol),
            payload=q.change_pct,
        )
        for q in quotes
    ]


def items_from_frame(
    frame: pd.DataFrame,
    strategy="equal",
    holdings: Optional[Mapping[str, Optional[float]]] = None,
    classifier: Callable[[str], str] = _sector_of,
) -> List[TreemapItem]:
    """
    Same as items_from_quotes for a quotes DataFrame.

    Needs the columns symbol, last, change_pct and volume. A sector column,
    when present and non-empty, wins over the classifier.
    """
    strategy = SizeStrategy.parse(strategy)
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"quotes frame is missing columns: {', '.join(missing)}")
    if frame.empty:
        return []

    df = frame.copy()
    df["symbol"] = df["symbol"].astype(str)
    for col in ("last", "change_pct", "volume"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0)

    if strategy is SizeStrategy.EQUAL:
        df["weight"] = 1.0
    elif strategy is SizeStrategy.VOLUME:
        df["weight"] = df["volume"]
    else:
        shares = df["symbol"].map(lambda s: (holdings or {}).get(s))
        shares = pd.to_numeric(shares, errors="coerce").fillna(FALLBACK_SHARES)
        df["weight"] = shares * df["last"]

    classified = df["symbol"].map(classifier)
    if "sector" in df.columns:
        given = df["sector"].where(df["sector"].notna(), "").astype(str).str.strip()
        df["sector"] = given.where(given != "", classified)
    else:
        df["sector"] = classified

    return [
        TreemapItem(
            identifier=row.symbol,
            weight=float(row.weight),
            category=row.sector,
            payload=float(row.change_pct),
        )
        for row in df.itertuples(index=False)
    ]
