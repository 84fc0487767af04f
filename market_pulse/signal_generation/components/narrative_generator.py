"""
Narrative Generator component.

Produces the short market story shown on the dashboard. The template variant is
deterministic; the language-model variant makes a single attempt and falls back
to the template on any failure.
"""
from typing import Any, Dict, Optional

from market_pulse.indicators import COT, ETF, FEAR_GREED, FUNDING
from market_pulse.llm.client import LLMError
from market_pulse.utils.logging import get_logger

from ..core import AggregateSignal

logger = get_logger(__name__)

STORY_PROMPT = """Tu es un analyste crypto qui parle à des débutants. Écris 3-4 phrases COURTES et PERCUTANTES pour expliquer la situation du marché.

DONNÉES:
- Fear & Greed: {fear_greed}/100 ({fear_greed_label})
- Hedge Funds: {hedge_funds_short}% SHORT
- Institutions: {institutions}
- ETF Flows: {etf_flows}
- Funding: {funding}%
- Signal global: {label}

RÈGLES:
- Parle comme si tu expliquais à un ami
- Utilise des mots simples
- Pas de jargon technique
- Fais RESSENTIR l'émotion du marché
- Maximum 4 phrases

Réponds uniquement avec le texte, sans introduction."""


def _format_number(value: float) -> str:
    return f"{value:g}"


class NarrativeGenerator:
    """
    Builds the market story from the indicators and the aggregate signal.
    """

    def __init__(self, llm_client: Optional[Any] = None, config: Optional[Dict] = None):
        """
        Initialize the narrative generator.

        Args:
            llm_client: Object exposing ``async generate(prompt, ...) -> str``.
                When None, only the template variant is used.
            config: Optional ``temperature`` and ``max_tokens`` for the model call.
        """
        config = config or {}
        self.llm_client = llm_client
        self.temperature = config.get("temperature", 0.7)
        self.max_tokens = config.get("max_tokens", 300)

    async def narrate(self, indicators: Dict[str, Any], aggregate: AggregateSignal) -> str:
        """
        Generate the story, preferring the language model when configured.

        Args:
            indicators: Mapping of source name to indicator record or None.
            aggregate: Output of the signal aggregator.

        Returns:
            str: Story text.
        """
        if self.llm_client is None:
            return self.template(indicators, aggregate)

        try:
            text = await self.llm_client.generate(
                self.build_prompt(indicators, aggregate),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except LLMError as e:
            logger.warning(f"Story generation failed, using template: {e}")
            return self.template(indicators, aggregate)

        text = (text or "").strip()
        if not text:
            logger.warning("Story generation returned empty text, using template")
            return self.template(indicators, aggregate)
        return text

    def build_prompt(self, indicators: Dict[str, Any], aggregate: AggregateSignal) -> str:
        fear_greed = indicators.get(FEAR_GREED)
        cot = indicators.get(COT)
        etf = indicators.get(ETF)
        funding = indicators.get(FUNDING)

        if etf is not None:
            sign = "+" if etf.daily > 0 else ""
            etf_flows = f"{sign}${_format_number(etf.daily)}M"
        else:
            etf_flows = "n/a"

        return STORY_PROMPT.format(
            fear_greed=fear_greed.current if fear_greed else "n/a",
            fear_greed_label=fear_greed.label if fear_greed else "n/a",
            hedge_funds_short=_format_number(cot.hedge_funds.short_pct) if cot else "n/a",
            institutions=cot.institutions.signal if cot else "n/a",
            etf_flows=etf_flows,
            funding=funding.current if funding else "n/a",
            label=aggregate.label,
        )

    def template(self, indicators: Dict[str, Any], aggregate: AggregateSignal) -> str:
        """
        Deterministic story built from fixed sentence fragments.

        Fear & Greed defaults to 50, the hedge-fund short share to 50 and the
        ETF daily flow to 0 when the matching indicator is absent.
        """
        fear_greed = indicators.get(FEAR_GREED)
        cot = indicators.get(COT)
        etf = indicators.get(ETF)

        fg = fear_greed.current if fear_greed else 50
        hf_short = cot.hedge_funds.short_pct if cot else 50
        etf_daily = etf.daily if etf else 0

        if fg <= 20:
            story = f"Le marché est en <strong>panique totale</strong>. Le Fear & Greed à {fg} montre que tout le monde a peur. "
        elif fg <= 40:
            story = f"Le marché reste <strong>nerveux</strong>. Avec un Fear & Greed à {fg}, la prudence domine. "
        elif fg >= 75:
            story = f"L'<strong>euphorie</strong> s'installe. Un Fear & Greed à {fg} signale que le marché s'emballe. "
        else:
            story = f"Le marché cherche sa direction. Le Fear & Greed à {fg} montre une <strong>hésitation</strong>. "

        if hf_short > 60:
            story += (
                f"<strong>{_format_number(hf_short)}% des hedge funds</strong> parient contre Bitcoin"
                " - ils pourraient se faire piéger. "
            )

        if etf_daily > 50:
            story += (
                f'Les ETF ont attiré <span class="highlight-green">+${_format_number(etf_daily)}M</span>'
                " - les institutions accumulent. "
            )
        elif etf_daily < -50:
            story += (
                f'Les ETF perdent <span class="highlight-red">${_format_number(abs(etf_daily))}M</span>'
                " - les institutions prennent leurs profits. "
            )

        if "accumulation" in aggregate.signal:
            story += "<strong>C'est souvent dans ces moments que les opportunités se créent.</strong>"
        elif "distribution" in aggregate.signal:
            story += "<strong>La prudence est de mise dans ce contexte.</strong>"

        return story
