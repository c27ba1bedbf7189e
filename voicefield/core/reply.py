"""
Reply Generator

Short templated acknowledgement built from four independently chosen
phrase slots. No randomness: (fragment, analysis) fully determines the text.
"""

from __future__ import annotations

from ..contracts.events import Analysis
from .clusters import capitalize


OPEN_MIC_REPLY = "Open mic. Speak your idea and I'll plot the Grok visual in real-time."
IDLE_REPLY = "Ready when you are. Share your thought and I will map the field in real-time."
STREAMING_REPLY = "Streaming... anchoring the Grok visual to your voice signal."
PAUSED_REPLY = "Mic paused. Drop another thought or type it in to extend the Grok visual."

HEADLINE_SEPARATOR = " · "
HEADLINE_FALLBACK = "Listening"

REPLY_TEMPLATE = "{tone} Grok vector locked. {headline} indicates {trend}. {closing}"


def choose_tone(sentiment: float) -> str:
    if sentiment > 0.2:
        return "Uplifted"
    if sentiment < -0.2:
        return "Cautious"
    return "Neutral"


def choose_headline(analysis: Analysis) -> str:
    headline = HEADLINE_SEPARATOR.join(capitalize(k) for k in analysis.keywords[:2])
    return headline or HEADLINE_FALLBACK


def choose_trend(sentiment: float) -> str:
    if sentiment > 0.15:
        return "momentum is tilting upward"
    if sentiment < -0.15:
        return "momentum is cooling down"
    return "signal is steady"


def choose_closing(energy: float) -> str:
    if energy > 0.7:
        return "Let's chase that spike before it dissipates."
    if energy < 0.3:
        return "We can probe deeper if you want to expand the field."
    return "I'm maintaining orbit. Drop another detail when ready."


def generate_reply(latest_fragment: str, analysis: Analysis) -> str:
    """Acknowledge the latest fragment against the current analysis."""
    if not latest_fragment.strip():
        return IDLE_REPLY

    return REPLY_TEMPLATE.format(
        tone=choose_tone(analysis.sentiment),
        headline=choose_headline(analysis),
        trend=choose_trend(analysis.sentiment),
        closing=choose_closing(analysis.energy),
    )
