"""Static ticker to sector lookup used to cluster heatmap tiles."""

from enum import Enum


class MarketSector(str, Enum):
    TECHNOLOGY = "Technology"
    FINANCIALS = "Financials"
    HEALTHCARE = "Healthcare"
    ENERGY = "Energy"
    CONSUMER = "Consumer"
    INDUSTRIALS = "Industrials"
    COMMUNICATION = "Communication"
    UTILITIES = "Utilities"
    REAL_ESTATE = "Real Estate"
    MATERIALS = "Materials"


_SECTOR_TICKERS = {
    MarketSector.TECHNOLOGY: ["AAPL", "MSFT", "NVDA", "AMD", "INTC", "CRM", "ORCL", "ADBE"],
    MarketSector.COMMUNICATION: ["GOOGL", "GOOG", "META", "NFLX", "DIS"],
    MarketSector.CONSUMER: ["AMZN", "TSLA", "NKE", "SBUX", "MCD", "HD", "WMT", "COST"],
    MarketSector.FINANCIALS: ["JPM", "BAC", "GS", "MS", "V", "MA", "BRK.B"],
    MarketSector.HEALTHCARE: ["JNJ", "PFE", "UNH", "ABBV", "MRK", "LLY"],
    MarketSector.ENERGY: ["XOM", "CVX", "COP", "SLB"],
    MarketSector.INDUSTRIALS: ["BA", "CAT", "GE", "HON", "UPS"],
    MarketSector.UTILITIES: ["NEE", "DUK", "SO"],
}

SECTOR_BY_TICKER = {ticker: sector for sector, tickers in _SECTOR_TICKERS.items() for ticker in tickers}


def classify(symbol: str, default: MarketSector = MarketSector.TECHNOLOGY) -> MarketSector:
    """Sector of a ticker; unknown tickers fall back to default."""
    return SECTOR_BY_TICKER.get(symbol.strip().upper(), default)
