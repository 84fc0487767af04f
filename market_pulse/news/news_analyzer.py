"""
News analysis with market context.

The language model annotates each headline (French title, one-line summary,
impact, price effect, importance) against the latest market document and writes
a short narrative over the most important items. Without a model every item
gets a neutral default annotation and no narrative is produced.
"""
import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from market_pulse.data.persistence import read_json
from market_pulse.llm.client import LLMError
from market_pulse.news.rss import NewsItem
from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)

JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

DEFAULT_IMPACT = "neutre"
DEFAULT_IMPORTANCE = 3
SUMMARY_LIMIT = 150
PROMPT_DESCRIPTION_LIMIT = 200

ANALYSIS_PROMPT = """Tu es un analyste crypto expert. Analyse ces news EN CONTEXTE du marché actuel.
{context}

NEWS À ANALYSER:
{news}

Pour CHAQUE news, donne:
1. titleFr: Titre traduit en français (accrocheur, max 60 chars)
2. summary: Résumé en 1 phrase simple (pour débutant)
3. impact: "bullish", "bearish", ou "neutre"
4. priceEffect: Explication de l'impact potentiel sur le prix (1-2 phrases, en contexte du marché actuel)
5. importance: Note de 1-5 (5 = très important pour un trader)
6. contextLink: Comment cette news se connecte au contexte actuel (1 phrase)

IMPORTANT: Prends en compte le contexte marché ! Une news bullish dans un marché en fear extrême = potentiel rebond. Une news bearish quand tout le monde est short = peut-être déjà pricé.

Réponds en JSON valide uniquement:
[{{"index": 1, "titleFr": "...", "summary": "...", "impact": "...", "priceEffect": "...", "importance": 5, "contextLink": "..."}}, ...]"""

NARRATIVE_PROMPT = """Tu es un analyste crypto qui parle à des débutants.

CONTEXTE MARCHÉ:
- Fear & Greed: {fear_greed}/100 ({fear_greed_label})
- Hedge Funds: {hedge_funds_short}% SHORT sur Bitcoin
- ETF Flows: {etf_flow}
- Signal Smart Money: {signal}

NEWS IMPORTANTES DU JOUR:
{news}

Écris un PARAGRAPHE (4-5 phrases) qui:
1. Relie les news au contexte du marché
2. Explique ce que ça signifie pour le prix
3. Donne une perspective actionnable (attendre, accumuler, prudence)
4. Utilise un ton accessible, pas de jargon

Réponds uniquement avec le paragraphe, sans introduction."""


def _signed_flow(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    sign = "+" if value > 0 else ""
    return f"{sign}${value:g}M"


@dataclass
class MarketContext:
    """Snapshot of the previous market document used to frame the news."""
    fear_greed: Optional[int] = None
    fear_greed_label: Optional[str] = None
    hedge_funds_short: Optional[float] = None
    institutions_signal: Optional[str] = None
    etf_flow: Optional[float] = None
    funding_rate: Optional[float] = None
    signal: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Subset persisted in ``news.json``."""
        return {
            "fearGreed": self.fear_greed,
            "hedgeFundsShort": self.hedge_funds_short,
            "signal": self.signal,
        }

    def to_prompt(self) -> str:
        return (
            "\nCONTEXTE MARCHÉ ACTUEL:\n"
            f"- Fear & Greed: {self.fear_greed}/100 ({self.fear_greed_label})\n"
            f"- Hedge Funds: {self.hedge_funds_short}% SHORT\n"
            f"- Institutions: {self.institutions_signal}\n"
            f"- ETF Flows 24h: {_signed_flow(self.etf_flow)}\n"
            f"- Funding Rate: {self.funding_rate}%\n"
            f"- Signal global: {self.signal}\n"
        )


def _get(document: Dict[str, Any], *keys: str) -> Optional[Any]:
    value: Any = document
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def read_market_context(data_path: Union[str, Path]) -> Optional[MarketContext]:
    """
    Build the market context from the last persisted market document.

    Returns:
        MarketContext, or None when the document is missing or unreadable.
    """
    document = read_json(data_path)
    if not isinstance(document, dict):
        return None
    return MarketContext(
        fear_greed=_get(document, "fearGreed", "current"),
        fear_greed_label=_get(document, "fearGreed", "label"),
        hedge_funds_short=_get(document, "cot", "categories", "leveragedFunds", "shortPct"),
        institutions_signal=_get(document, "cot", "categories", "assetManagers", "signal"),
        etf_flow=_get(document, "etf", "daily"),
        funding_rate=_get(document, "funding", "btc", "current"),
        signal=_get(document, "analysis", "label"),
    )


@dataclass
class AnalyzedNews:
    """A news item with its market annotation."""
    item: NewsItem
    title_fr: str
    summary: str
    impact: str = DEFAULT_IMPACT
    price_effect: str = ""
    importance: int = DEFAULT_IMPORTANCE
    context_link: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title_fr,
            "titleOriginal": self.item.title,
            "summary": self.summary,
            "impact": self.impact,
            "priceEffect": self.price_effect,
            "contextLink": self.context_link,
            "importance": self.importance,
            "source": self.item.source,
            "link": self.item.link,
            "date": self.item.date,
        }


def default_annotation(item: NewsItem, price_effect: str = "") -> AnalyzedNews:
    return AnalyzedNews(
        item=item,
        title_fr=item.title,
        summary=item.description[:SUMMARY_LIMIT],
        price_effect=price_effect,
    )


def _importance(value: Any) -> int:
    try:
        importance = int(value)
    except (TypeError, ValueError):
        return DEFAULT_IMPORTANCE
    return importance or DEFAULT_IMPORTANCE


class NewsAnalyzer:
    """
    Annotates news items and writes the news narrative.
    """

    def __init__(self, llm_client: Optional[Any] = None, config: Optional[Dict] = None):
        """
        Initialize the news analyzer.

        Args:
            llm_client: Object exposing ``async generate(prompt, ...) -> str``.
            config: Optional model parameters (``analysis_temperature``,
                ``analysis_max_tokens``, ``narrative_temperature``,
                ``narrative_max_tokens``) and selection thresholds
                (``min_importance``, ``max_published``,
                ``narrative_min_importance``, ``narrative_items``).
        """
        config = config or {}
        self.llm_client = llm_client
        self.analysis_temperature = config.get("analysis_temperature", 0.4)
        self.analysis_max_tokens = config.get("analysis_max_tokens", 2500)
        self.narrative_temperature = config.get("narrative_temperature", 0.7)
        self.narrative_max_tokens = config.get("narrative_max_tokens", 400)
        self.min_importance = config.get("min_importance", 3)
        self.max_published = config.get("max_published", 5)
        self.narrative_min_importance = config.get("narrative_min_importance", 4)
        self.narrative_items = config.get("narrative_items", 3)

    async def analyze(self, items: List[NewsItem], context: Optional[MarketContext]) -> List[AnalyzedNews]:
        """
        Annotate every item.

        Annotations are matched to items by their 1-based ``index``; missing
        fields take the default annotation's values.
        """
        if not items:
            return []
        if self.llm_client is None:
            return [default_annotation(item, price_effect="Impact incertain") for item in items]

        try:
            content = await self.llm_client.generate(
                self.build_analysis_prompt(items, context),
                temperature=self.analysis_temperature,
                max_tokens=self.analysis_max_tokens,
            )
            annotations = self._parse_annotations(content)
        except (LLMError, ValueError) as e:
            logger.warning(f"News analysis failed, using default annotations: {e}")
            return [default_annotation(item) for item in items]

        by_index = {}
        for annotation in annotations:
            index = annotation.get("index") if isinstance(annotation, dict) else None
            if isinstance(index, int) and not isinstance(index, bool):
                by_index[index] = annotation
        analyzed = []
        for position, item in enumerate(items, start=1):
            annotation = by_index.get(position, {})
            analyzed.append(
                AnalyzedNews(
                    item=item,
                    title_fr=annotation.get("titleFr") or item.title,
                    summary=annotation.get("summary") or item.description[:SUMMARY_LIMIT],
                    impact=annotation.get("impact") or DEFAULT_IMPACT,
                    price_effect=annotation.get("priceEffect") or "",
                    importance=_importance(annotation.get("importance")),
                    context_link=annotation.get("contextLink") or "",
                )
            )
        return analyzed

    def select_published(self, analyzed: List[AnalyzedNews]) -> List[AnalyzedNews]:
        """Items important enough for the dashboard, in analysis order."""
        return [n for n in analyzed if n.importance >= self.min_importance][:self.max_published]

    async def generate_narrative(
        self, news: List[AnalyzedNews], context: Optional[MarketContext]
    ) -> Optional[str]:
        """
        Write a paragraph tying the most important news to the market context.

        Returns:
            The paragraph, or None without a model, a context or important news.
        """
        if self.llm_client is None or context is None:
            return None

        top_news = [n for n in news if n.importance >= self.narrative_min_importance][:self.narrative_items]
        if not top_news:
            return None

        prompt = NARRATIVE_PROMPT.format(
            fear_greed=context.fear_greed,
            fear_greed_label=context.fear_greed_label,
            hedge_funds_short=context.hedge_funds_short,
            etf_flow=_signed_flow(context.etf_flow),
            signal=context.signal,
            news="\n".join(f"- {n.title_fr}: {n.summary}" for n in top_news),
        )
        try:
            narrative = await self.llm_client.generate(
                prompt,
                temperature=self.narrative_temperature,
                max_tokens=self.narrative_max_tokens,
            )
        except LLMError as e:
            logger.warning(f"News narrative failed: {e}")
            return None
        return (narrative or "").strip() or None

    def build_analysis_prompt(self, items: List[NewsItem], context: Optional[MarketContext]) -> str:
        news = "\n\n".join(
            f"{position}. {item.title}\n   {item.description[:PROMPT_DESCRIPTION_LIMIT]}"
            for position, item in enumerate(items, start=1)
        )
        return ANALYSIS_PROMPT.format(context=context.to_prompt() if context else "", news=news)

    @staticmethod
    def _parse_annotations(content: str) -> List[Any]:
        match = JSON_ARRAY_RE.search(content or "")
        if not match:
            raise ValueError("no JSON array in model response")
        annotations = json.loads(match.group(0))
        if not isinstance(annotations, list):
            raise ValueError("model response is not a JSON array")
        return annotations
