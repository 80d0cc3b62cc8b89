"""
Tests for the research service.

Tests cover:
- LLM-backed signal analysis and its rule-based fallback
- Symbol lookup
- Web-search grounded context, news, profile and strategy
- Degraded answers when the LLM fails
"""

import asyncio
import json

import pytest

from stockwatch.schemas.indicators import MACDData, TechnicalIndicators
from stockwatch.schemas.research import (
    AnalysisSource,
    ResearchRequest,
    StrategyAction,
    TradeSignal,
    TrendBias,
)
from stockwatch.services.llm.client import ModelTier
from stockwatch.services.llm.research import CONTEXT_UNAVAILABLE, ResearchService
from stockwatch.services.market_data.generator import generate_series
from conftest import FIXED_END_DATE, llm_response


def indicators(rsi, macd_line):
    return TechnicalIndicators(
        rsi=rsi,
        macd=MACDData(
            macd_line=macd_line,
            signal_line=macd_line * 0.9,
            histogram=macd_line * 0.1,
        ),
    )


def research_request(rsi=50.0, macd_line=0.0):
    return ResearchRequest(
        symbol="AAPL",
        bars=generate_series("AAPL", 30, 230.0, end_date=FIXED_END_DATE),
        indicators=indicators(rsi, macd_line),
    )


STRATEGY_JSON = {
    "action": "BUY",
    "actionTitle": "Aggressive accumulation",
    "longTermTrend": "BULLISH",
    "entryZone": "$225 - $230",
    "takeProfit": "$280",
    "stopLoss": "$210",
    "riskRewardRatio": "1 : 2.5",
    "winRate": "65%",
    "catalysts": ["Earnings", "Product launch"],
    "scenarios": {"bearish": "$200", "base": "$250", "bullish": "$300"},
    "timeHorizon": "3-6 months",
    "riskLevel": "Very High",
    "rationale": "Momentum is strong.",
}


# =============================================================================
# Signal analysis
# =============================================================================

class TestAnalysis:
    """Tests for ResearchService.execute."""

    def test_llm_signal(self, fake_llm):
        fake_llm.generate.return_value = llm_response(
            '```json\n{"signal": "buy", "reasoning": "RSI recovering.", "confidence": 72}\n```'
        )
        result = asyncio.run(ResearchService(fake_llm).execute(research_request()))

        assert result.signal == TradeSignal.BUY
        assert result.confidence == 72
        assert result.reasoning == "RSI recovering."
        assert result.source == AnalysisSource.LLM

        kwargs = fake_llm.generate.await_args.kwargs
        assert kwargs["model_tier"] == ModelTier.REASONING
        assert kwargs["response_format"] == "json"

    def test_confidence_clamped(self, fake_llm):
        fake_llm.generate.return_value = llm_response(
            '{"signal": "SELL", "reasoning": "x", "confidence": 140}'
        )
        result = asyncio.run(ResearchService(fake_llm).execute(research_request()))
        assert result.confidence == 100

    def test_failure_falls_back_to_rules(self, failing_llm):
        result = asyncio.run(ResearchService(failing_llm).execute(research_request()))

        assert result.source == AnalysisSource.RULES
        assert result.signal == TradeSignal.HOLD
        assert result.confidence == 0
        assert result.reasoning.startswith("AI analysis unavailable.")

    def test_garbage_falls_back_to_rules(self, fake_llm):
        fake_llm.generate.return_value = llm_response("I think you should buy.")
        result = asyncio.run(ResearchService(fake_llm).execute(research_request()))
        assert result.source == AnalysisSource.RULES

    def test_unknown_signal_falls_back_to_rules(self, fake_llm):
        fake_llm.generate.return_value = llm_response(
            '{"signal": "STRONG BUY", "reasoning": "x", "confidence": 90}'
        )
        result = asyncio.run(ResearchService(fake_llm).execute(research_request()))
        assert result.source == AnalysisSource.RULES

    @pytest.mark.parametrize("rsi,macd_line,signal,confidence", [
        (25.0, 0.5, TradeSignal.BUY, 60),
        (25.0, -0.5, TradeSignal.BUY, 40),
        (80.0, -0.5, TradeSignal.SELL, 60),
        (80.0, 0.5, TradeSignal.SELL, 40),
        (50.0, 2.0, TradeSignal.HOLD, 0),
    ])
    def test_rule_table(self, failing_llm, rsi, macd_line, signal, confidence):
        service = ResearchService(failing_llm)
        result = asyncio.run(service.execute(research_request(rsi, macd_line)))

        assert result.signal == signal
        assert result.confidence == confidence


# =============================================================================
# Symbol lookup
# =============================================================================

class TestLookup:

    def test_resolves_symbol(self, fake_llm):
        fake_llm.generate.return_value = llm_response(
            '{"symbol": "aapl", "name": "Apple Inc.", "sector": "Technology"}'
        )
        result = asyncio.run(ResearchService(fake_llm).lookup_symbol("Apple"))

        assert result.symbol == "AAPL"
        assert result.name == "Apple Inc."
        assert result.alert_price is None

    def test_null_answer(self, fake_llm):
        fake_llm.generate.return_value = llm_response("null")
        assert asyncio.run(ResearchService(fake_llm).lookup_symbol("asdf")) is None

    def test_incomplete_answer(self, fake_llm):
        fake_llm.generate.return_value = llm_response('{"symbol": "AAPL"}')
        assert asyncio.run(ResearchService(fake_llm).lookup_symbol("Apple")) is None

    def test_failure(self, failing_llm):
        assert asyncio.run(ResearchService(failing_llm).lookup_symbol("Apple")) is None


# =============================================================================
# Web-search research
# =============================================================================

class TestMarketContext:

    def test_parses_price_and_news(self, fake_llm):
        fake_llm.generate.return_value = llm_response(
            "PRICE: 230.50\nNEWS: Apple unveils new chips.",
            source_urls=["https://a", "https://b", "https://c", "https://d"],
        )
        context = asyncio.run(ResearchService(fake_llm).fetch_market_context("AAPL"))

        assert context.real_time_price == "230.50"
        assert context.news_summary == "Apple unveils new chips."
        assert context.source_urls == ["https://a", "https://b", "https://c"]
        assert fake_llm.generate.await_args.kwargs["use_search"] is True

    def test_failure(self, failing_llm):
        context = asyncio.run(ResearchService(failing_llm).fetch_market_context("AAPL"))

        assert context.real_time_price is None
        assert context.news_summary == CONTEXT_UNAVAILABLE
        assert context.source_urls == []


class TestNews:

    def test_parses_articles(self, fake_llm):
        articles = [
            {"title": "Chip demand soars", "summary": "...", "source": "Reuters", "time": "2h ago"},
            {"title": "Analyst upgrade", "url": "https://example.com/upgrade"},
            "not an article",
        ]
        fake_llm.generate.return_value = llm_response(
            "Here you go:\n" + json.dumps(articles),
            source_urls=["https://grounding/1"],
        )
        news = asyncio.run(ResearchService(fake_llm).fetch_news("NVDA"))

        assert [n.title for n in news] == ["Chip demand soars", "Analyst upgrade"]
        assert news[0].url == "https://grounding/1"
        assert news[1].url == "https://example.com/upgrade"
        assert news[1].source == "N/A"

    def test_no_array(self, fake_llm):
        fake_llm.generate.return_value = llm_response("No news found.")
        assert asyncio.run(ResearchService(fake_llm).fetch_news("NVDA")) == []

    def test_failure(self, failing_llm):
        assert asyncio.run(ResearchService(failing_llm).fetch_news("NVDA")) == []


class TestCompanyProfile:

    def test_normalizes_fields(self, fake_llm):
        fake_llm.generate.return_value = llm_response(
            '{"ceo": "Tim Cook", "founded": 1976, "marketCap": null, "peRatio": "31.2"}'
        )
        profile = asyncio.run(ResearchService(fake_llm).fetch_company_profile("AAPL"))

        assert profile.ceo == "Tim Cook"
        assert profile.founded == "1976"
        assert profile.market_cap == "N/A"
        assert profile.pe_ratio == "31.2"
        assert profile.website == "N/A"

    def test_failure(self, failing_llm):
        assert asyncio.run(ResearchService(failing_llm).fetch_company_profile("AAPL")) is None


class TestStrategy:

    def test_parses_report(self, fake_llm):
        fake_llm.generate.return_value = llm_response(json.dumps(STRATEGY_JSON))
        bars = generate_series("AAPL", 40, 230.0, end_date=FIXED_END_DATE)
        strategy = asyncio.run(
            ResearchService(fake_llm).fetch_investment_strategy("AAPL", 230.0, bars)
        )

        assert strategy.action == StrategyAction.BUY
        assert strategy.long_term_trend == TrendBias.BULLISH
        assert strategy.win_rate == 65.0
        assert strategy.scenarios.bullish == "$300"
        assert fake_llm.generate.await_args.kwargs["model_tier"] == ModelTier.REASONING

    def test_missing_fields(self, fake_llm):
        fake_llm.generate.return_value = llm_response('{"action": "BUY"}')
        bars = generate_series("AAPL", 40, 230.0, end_date=FIXED_END_DATE)
        strategy = asyncio.run(
            ResearchService(fake_llm).fetch_investment_strategy("AAPL", 230.0, bars)
        )
        assert strategy is None

    def test_failure(self, failing_llm):
        bars = generate_series("AAPL", 40, 230.0, end_date=FIXED_END_DATE)
        strategy = asyncio.run(
            ResearchService(failing_llm).fetch_investment_strategy("AAPL", 230.0, bars)
        )
        assert strategy is None


class TestHealth:

    def test_delegates_to_llm(self, fake_llm, failing_llm):
        assert asyncio.run(ResearchService(fake_llm).health_check()) is True
        assert asyncio.run(ResearchService(failing_llm).health_check()) is False
