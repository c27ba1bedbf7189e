"""
Reply Generator Tests
=====================

INVARIANTS TESTED:
1. Blank fragment → idle reply regardless of analysis
2. Tone/trend/closing thresholds are strict inequalities
3. Headline falls back to "Listening" with no keywords
"""

import pytest

from voicefield.contracts.events import Analysis
from voicefield.core import analyze_text, generate_reply
from voicefield.core.reply import (
    IDLE_REPLY, choose_closing, choose_headline, choose_tone, choose_trend
)


class TestReplyText:

    def test_positive_first_fragment(self):
        fragment = "This is a great win for the team"
        reply = generate_reply(fragment, analyze_text(fragment))

        assert reply == (
            "Uplifted Grok vector locked. Great · Win indicates momentum is "
            "tilting upward. I'm maintaining orbit. Drop another detail when ready."
        )

    def test_mixed_corpus(self):
        corpus = "This is a great win for the team but I'm worried about the risk"
        reply = generate_reply("but I'm worried about the risk", analyze_text(corpus))

        assert reply == (
            "Neutral Grok vector locked. Great · Win indicates signal is steady. "
            "We can probe deeper if you want to expand the field."
        )

    @pytest.mark.parametrize("fragment", ["", "   ", "\n\t"])
    def test_blank_fragment_is_idle(self, fragment):
        assert generate_reply(fragment, analyze_text("great win")) == IDLE_REPLY

    def test_headline_fallback(self):
        reply = generate_reply("uh", Analysis.empty())
        assert reply.startswith("Neutral Grok vector locked. Listening indicates signal is steady.")


class TestThresholds:

    @pytest.mark.parametrize("sentiment,tone", [
        (0.21, "Uplifted"), (0.2, "Neutral"), (-0.2, "Neutral"), (-0.21, "Cautious"),
    ])
    def test_tone(self, sentiment, tone):
        assert choose_tone(sentiment) == tone

    @pytest.mark.parametrize("sentiment,trend", [
        (0.16, "momentum is tilting upward"),
        (0.15, "signal is steady"),
        (-0.15, "signal is steady"),
        (-0.16, "momentum is cooling down"),
    ])
    def test_trend(self, sentiment, trend):
        assert choose_trend(sentiment) == trend

    @pytest.mark.parametrize("energy,closing", [
        (0.71, "Let's chase that spike before it dissipates."),
        (0.7, "I'm maintaining orbit. Drop another detail when ready."),
        (0.3, "I'm maintaining orbit. Drop another detail when ready."),
        (0.29, "We can probe deeper if you want to expand the field."),
    ])
    def test_closing(self, energy, closing):
        assert choose_closing(energy) == closing

    def test_headline_uses_two_keywords(self):
        analysis = analyze_text("alpha alpha beta gamma")
        assert choose_headline(analysis) == "Alpha · Beta"
