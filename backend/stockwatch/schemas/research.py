"""
CONTRACT 3: AI Research Layer

Input: ResearchRequest (symbol + series + indicators)
Output: AnalysisResult, MarketContext, NewsItem, CompanyProfile, InvestmentStrategy

This module uses the LLM for:
- Symbol lookup from free-text queries
- Trading signal commentary
- News digest and company profile (web-search grounded)
- Strategy report

CRITICAL: LLM does NO math. RSI/MACD come from the Indicator Engine.
LLM JSON uses camelCase keys, so models accept aliases and field names.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from stockwatch.schemas.market import OHLCBar
from stockwatch.schemas.indicators import TechnicalIndicators


# =============================================================================
# ENUMS
# =============================================================================


class TradeSignal(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class StrategyAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    WAIT = "WAIT"


class TrendBias(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class AnalysisSource(str, Enum):
    LLM = "llm"
    RULES = "rules"  # LLM unavailable, deterministic fallback


# =============================================================================
# INPUT: ResearchRequest
# =============================================================================


class ResearchRequest(BaseModel):
    """
    Everything the analysis prompt needs.
    Sent by: API
    Received by: Research Service
    """

    symbol: str = Field(..., min_length=1)
    bars: list[OHLCBar] = Field(..., min_length=1)
    indicators: TechnicalIndicators


# =============================================================================
# OUTPUT: Research Components
# =============================================================================


class StockSymbol(BaseModel):
    """Resolved ticker, as stored in the watchlist."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str = Field(..., min_length=1)
    name: str
    sector: str
    alert_price: Optional[float] = Field(default=None, gt=0, alias="alertPrice")

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return v.strip().upper()


class AnalysisResult(BaseModel):
    """Trading signal with reasoning."""

    signal: TradeSignal
    reasoning: str
    confidence: float = Field(..., ge=0, le=100)
    source: AnalysisSource = AnalysisSource.LLM

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v):
        return max(0.0, min(100.0, float(v)))


class MarketContext(BaseModel):
    """Real-time price text plus a one-line news summary."""

    model_config = ConfigDict(populate_by_name=True)

    real_time_price: Optional[str] = Field(default=None, alias="realTimePrice")
    news_summary: str = Field(..., alias="newsSummary")
    source_urls: list[str] = Field(default_factory=list, alias="sourceUrls")


class NewsItem(BaseModel):
    """Single news article from the web-search digest."""

    title: str
    summary: str = ""
    source: str = "N/A"
    time: str = ""
    url: Optional[str] = None


class CompanyProfile(BaseModel):
    """Company fact sheet. Unknown fields are 'N/A'."""

    model_config = ConfigDict(populate_by_name=True)

    description: str = "N/A"
    ceo: str = "N/A"
    founded: str = "N/A"
    headquarters: str = "N/A"
    employees: str = "N/A"
    market_cap: str = Field(default="N/A", alias="marketCap")
    pe_ratio: str = Field(default="N/A", alias="peRatio")
    dividend_yield: str = Field(default="N/A", alias="dividendYield")
    website: str = "N/A"

    @field_validator("*", mode="before")
    @classmethod
    def stringify(cls, v):
        # LLM sometimes answers numbers (e.g. founded: 1976)
        if v is None:
            return "N/A"
        return str(v)


class PriceScenarios(BaseModel):
    """Bearish / base / bullish price targets."""

    bearish: str
    base: str
    bullish: str


class InvestmentStrategy(BaseModel):
    """Strategy report."""

    model_config = ConfigDict(populate_by_name=True)

    action: StrategyAction
    action_title: str = Field(..., alias="actionTitle")
    long_term_trend: TrendBias = Field(..., alias="longTermTrend")
    entry_zone: str = Field(..., alias="entryZone")
    take_profit: str = Field(..., alias="takeProfit")
    stop_loss: str = Field(..., alias="stopLoss")
    time_horizon: str = Field(..., alias="timeHorizon")
    risk_level: str = Field(..., alias="riskLevel")
    rationale: str

    risk_reward_ratio: str = Field(..., alias="riskRewardRatio")
    win_rate: float = Field(..., ge=0, le=100, alias="winRate")
    catalysts: list[str] = Field(default_factory=list)
    scenarios: PriceScenarios

    @field_validator("win_rate", mode="before")
    @classmethod
    def parse_win_rate(cls, v):
        # "65%" -> 65.0
        if isinstance(v, str):
            v = v.strip().rstrip("%")
        return max(0.0, min(100.0, float(v)))
