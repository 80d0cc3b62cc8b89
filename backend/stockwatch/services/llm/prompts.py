"""
LLM Prompt Templates

Structured prompts for the research layer.

CRITICAL RULES (enforced in all prompts):
- LLM does NO math - RSI/MACD values come from the Indicator Engine
- Free text goes out in the configured display language
- JSON answers use the exact keys the schemas expect
"""

import json
from typing import Optional

from stockwatch.core.config import settings


def _language() -> str:
    return settings.llm_output_language


def _bars_json(bars: list, indent: Optional[int] = None) -> str:
    return json.dumps(
        [b.model_dump() if hasattr(b, "model_dump") else b for b in bars],
        indent=indent,
        ensure_ascii=False,
    )


# =============================================================================
# SYMBOL LOOKUP
# =============================================================================

LOOKUP_SYSTEM_PROMPT = """You resolve free-text company or ticker queries to stock market symbols.
Answer with JSON only. If the query is not a public company, answer null."""

LOOKUP_USER_PROMPT_TEMPLATE = """Identify the major stock market symbol for the query: "{query}".
Prefer US listings if available, otherwise major global listings.

Return a STRICT JSON object (no markdown) with:
- symbol (e.g., "AAPL" or "TSM")
- name (Company Name, keep it short)
- sector (General sector, e.g., "Technology", translated to {language})

If the query is invalid or not a public company, return null."""


def format_lookup_prompt(query: str) -> str:
    return LOOKUP_USER_PROMPT_TEMPLATE.format(query=query, language=_language())


# =============================================================================
# TECHNICAL ANALYSIS (signal)
# =============================================================================

ANALYSIS_SYSTEM_PROMPT = """You are an expert technical analyst.

CRITICAL RULES:
1. NEVER do math - all indicator values are provided to you.
2. Signal must be exactly one of BUY, SELL, HOLD.
3. Confidence is a number from 0 to 100.
4. If data is insufficient or conflicting, answer HOLD with a low confidence.

OUTPUT FORMAT:
{"signal": "BUY" | "SELL" | "HOLD", "reasoning": "...", "confidence": 0-100}"""

ANALYSIS_USER_PROMPT_TEMPLATE = """Analyze the following stock data for {symbol}.

Current Indicators:
- RSI (14): {rsi}
- MACD Line: {macd_line}
- Signal Line: {signal_line}
- MACD Histogram: {histogram}

Recent Price Action (Last {recent_count} days):
{recent_bars}

Determine a trading signal (BUY, SELL, or HOLD) based on standard technical analysis rules.
Provide a concise reasoning and a confidence score (0-100).

IMPORTANT: The "reasoning" MUST be written in {language}."""


def format_analysis_prompt(symbol: str, bars: list, indicators, recent_count: int = 5) -> str:
    """Format the signal prompt. Indicators are display-rounded here."""
    macd = indicators.macd
    return ANALYSIS_USER_PROMPT_TEMPLATE.format(
        symbol=symbol,
        rsi=f"{indicators.rsi:.2f}",
        macd_line=f"{macd.macd_line:.4f}",
        signal_line=f"{macd.signal_line:.4f}",
        histogram=f"{macd.histogram:.4f}",
        recent_count=recent_count,
        recent_bars=_bars_json(bars[-recent_count:], indent=2),
        language=_language(),
    )


# =============================================================================
# MARKET CONTEXT / PRICE (web search)
# =============================================================================

SEARCH_SYSTEM_PROMPT = """You are a financial research assistant with web search.
Use the most recent information available. Follow the requested format exactly."""

CONTEXT_USER_PROMPT_TEMPLATE = """Find the current real-time price for {symbol} and the most important news headline from today.
If the market is closed, get the last closing price.

Format your answer exactly like this:
PRICE: [Insert Price Here]
NEWS: [Insert One Sentence News Summary Here in {language}]"""

PRICE_SYSTEM_PROMPT = """You report stock prices. Answer with a bare number only."""

PRICE_USER_PROMPT_TEMPLATE = """Find the current stock price of {symbol}. Return ONLY the number (e.g., 142.50). Do not include currency symbols or text."""


def format_context_prompt(symbol: str) -> str:
    return CONTEXT_USER_PROMPT_TEMPLATE.format(symbol=symbol, language=_language())


def format_price_prompt(symbol: str) -> str:
    return PRICE_USER_PROMPT_TEMPLATE.format(symbol=symbol)


# =============================================================================
# NEWS & COMPANY PROFILE (web search)
# =============================================================================

NEWS_USER_PROMPT_TEMPLATE = """Find {count} latest news articles for {symbol} stock.
Format the output as a valid JSON array of objects.
Each object should have keys: "title", "summary", "source", "time" (e.g. '2 hours ago').

IMPORTANT: "title" and "summary" MUST be translated to {language}.
Do not include markdown code blocks. Just the JSON string."""

PROFILE_USER_PROMPT_TEMPLATE = """Get company details for {symbol}.
Format the output as a valid JSON object with keys:
"description" (short bio), "ceo", "founded" (year), "headquarters", "employees",
"marketCap", "peRatio", "dividendYield", "website".
If data is unavailable, use "N/A".

IMPORTANT: "description" MUST be translated to {language}.
Do not include markdown code blocks. Just the JSON string."""


def format_news_prompt(symbol: str, count: int = 6) -> str:
    return NEWS_USER_PROMPT_TEMPLATE.format(symbol=symbol, count=count, language=_language())


def format_profile_prompt(symbol: str) -> str:
    return PROFILE_USER_PROMPT_TEMPLATE.format(symbol=symbol, language=_language())


# =============================================================================
# STRATEGY REPORT
# =============================================================================

STRATEGY_SYSTEM_PROMPT = """Act as an AGGRESSIVE Hedge Fund Manager building High-Risk/High-Reward plans.
Prices in the recent data are provided to you - do not invent history.
REMEMBER: You are providing analysis, not financial advice."""

STRATEGY_USER_PROMPT_TEMPLATE = """Analyze {symbol} for a High-Risk/High-Reward investment plan.
Current Price: {current_price}.
Recent Data: {recent_bars}.

Calculate a Risk/Reward Ratio (e.g., 1:3).
Estimate Win Rate % based on trend strength.
Identify 3 Price Scenarios: Bearish (Support break), Base (Realistic), Bullish (Moonshot).
Identify 3-4 Catalyst events (e.g. Earnings, Sector rotation, Macro).

Return a JSON object (no markdown) with this EXACT structure:
{{
  "action": "BUY" | "SELL" | "WAIT",
  "actionTitle": "Aggressive Title ({language})",
  "longTermTrend": "BULLISH" | "BEARISH" | "NEUTRAL",
  "entryZone": "Price range (e.g. $140 - $145)",
  "takeProfit": "Primary Target (e.g. $180)",
  "stopLoss": "Stop Price (e.g. $120)",
  "riskRewardRatio": "String (e.g. 1 : 3.5)",
  "winRate": Number (0-100),
  "catalysts": ["String 1", "String 2", "String 3"],
  "scenarios": {{
     "bearish": "Price string (e.g. $110)",
     "base": "Price string (e.g. $175)",
     "bullish": "Price string (e.g. $210)"
  }},
  "timeHorizon": "String (e.g. 3-6 months)",
  "riskLevel": "String (e.g. Very High)",
  "rationale": "Detailed analysis in {language} (approx 100 words)"
}}"""


def format_strategy_prompt(
    symbol: str,
    current_price: float,
    bars: list,
    recent_count: int = 20,
) -> str:
    return STRATEGY_USER_PROMPT_TEMPLATE.format(
        symbol=symbol,
        current_price=current_price,
        recent_bars=_bars_json(bars[-recent_count:]),
        language=_language(),
    )
