# SPDX-License-Identifier: Apache-2.0

"""
Lexicon-based sentiment scoring for complaint text.

Each token scores +1 (positive word), -1 (negative word) or 0. A preceding
intensifier multiplies the next scored word by 1.5 and a preceding negator
flips its sign. Modifiers expire after two unscored tokens. The raw total is
divided by the square root of the token count and clamped to [-1, 1].

Citizen complaints are mostly negative, so a score near -1 reads as a
distressed report, near 0 as neutral and near +1 as praise.
"""

import math
from dataclasses import dataclass
from typing import Any

from .text import tokenize


POSITIVE_WORDS = frozenset({
    # Resolution and positive outcome
    "good", "great", "excellent", "satisfied", "satisfactory", "resolved", "fixed", "done",
    "completed", "solved", "working", "improved", "better", "best", "fine", "okay", "ok",
    # Service quality
    "helpful", "cooperative", "responsive", "professional", "polite", "courteous",
    "efficient", "effective", "prompt", "timely", "quick", "fast", "reliable", "clean",
    "safe", "adequate", "proper", "correct", "accurate",
    # Gratitude
    "thank", "thanks", "thankyou", "appreciate", "appreciated", "grateful", "thankful",
    # General positive
    "happy", "pleased", "glad", "nice", "well", "positive", "praise", "commend",
    "superb", "wonderful", "perfect", "comfortable", "smooth", "easy", "convenient",
})

NEGATIVE_WORDS = frozenset({
    # Physical damage and hazards
    "broken", "damaged", "damage", "collapsed", "collapsing", "cracked", "destroyed",
    "fallen", "leaking", "leakage", "leak", "burst", "overflow", "overflowing", "flooded",
    "flood", "floods", "flooding", "fire", "fires", "burning", "smoke", "explosion", "blast",
    "collapse",
    # Safety and health
    "dangerous", "hazardous", "unsafe", "risk", "accident", "accidents", "injured", "injury",
    "injuries", "bleeding", "dead", "death", "deaths", "dying", "sick", "sickness", "disease",
    "diseases", "contaminated", "contamination", "epidemic", "rats", "insects", "pest", "pests",
    "stench", "smell", "sewage", "garbage", "filth", "filthy", "dirty", "unhygienic", "polluted",
    # Service failure
    "failed", "failure", "failures", "wrong", "error", "errors", "mistake", "mistakes",
    "neglected", "ignored", "delayed", "delay", "delays", "waiting", "slow", "late",
    "unresponsive", "missing", "absent", "shortage", "unavailable", "stopped",
    "disconnected", "cut", "lack", "lacking", "without", "issue", "issues",
    "problem", "problems", "complaint", "complaints", "complaining",
    # Emergency and urgency
    "emergency", "emergencies", "critical", "urgent", "severe", "extreme", "immediate",
    "desperate", "terrible", "horrible", "awful", "dreadful", "miserable", "helpless",
    "suffering",
    # Misconduct
    "corrupt", "corruption", "bribe", "bribes", "bribery", "fraud", "illegal",
    "theft", "stolen", "robbery", "violence", "attack", "attacks", "threatening",
    "threat", "threats", "harassment", "abuse", "abusive", "rude",
    # Emotional negative
    "angry", "anger", "frustrated", "frustrating", "disappointed", "disappointment",
    "worried", "concern", "scared", "afraid", "panic", "struggling",
    "crying", "furious", "outraged", "disgusted", "disgusting", "worst",
    "useless", "pathetic", "unbearable", "intolerable",
})

INTENSIFIERS = frozenset({
    "very", "extremely", "highly", "severely", "seriously", "absolutely", "completely",
    "totally", "utterly", "deeply", "badly", "terribly", "incredibly", "remarkably",
    "quite", "really", "so", "too", "much", "most", "truly", "genuinely", "massively",
    "dangerously", "critically", "urgently",
})

NEGATORS = frozenset({
    "not", "no", "never", "neither", "nor", "cannot", "cant", "wont", "isnt", "wasnt",
    "arent", "werent", "dont", "doesnt", "didnt", "wouldnt", "couldnt", "shouldnt",
    "hardly", "barely", "scarcely", "nothing", "nobody", "none", "nowhere",
})

INTENSIFIER_WEIGHT = 1.5
# Unscored tokens a modifier survives before it expires
MODIFIER_WINDOW = 2


@dataclass
class ModifierState:
    """Intensifier/negator state carried from token to token."""

    intensify: float = 1.0
    negate: bool = False
    ticks_since_modifier: int = 0

    def reset(self) -> None:
        self.intensify = 1.0
        self.negate = False
        self.ticks_since_modifier = 0

    def on_negator(self) -> None:
        self.negate = True
        self.intensify = 1.0
        self.ticks_since_modifier = 0

    def on_intensifier(self) -> None:
        # Leaves a pending negation in place
        self.intensify = INTENSIFIER_WEIGHT
        self.ticks_since_modifier = 0

    def on_scored(self, word_score: int) -> float:
        """Apply the current modifiers to ``word_score`` and consume them."""
        value = word_score * self.intensify * (-1 if self.negate else 1)
        self.reset()
        return value

    def on_unscored(self) -> None:
        self.ticks_since_modifier += 1
        if self.ticks_since_modifier >= MODIFIER_WINDOW:
            self.reset()


def word_score(token: str) -> int:
    """Lexicon score of a single token: +1, -1 or 0."""
    if token in POSITIVE_WORDS:
        return 1
    if token in NEGATIVE_WORDS:
        return -1
    return 0


def score_sentiment(text: Any) -> float:
    """
    Score the tone of ``text``.

    Stop words are not removed because most negators and intensifiers are
    short, common words.

    Args:
        text: Complaint text; empty or non-string input scores 0

    Returns:
        Score in [-1, 1] rounded to 4 decimal places
    """
    if not isinstance(text, str) or not text:
        return 0.0

    state = ModifierState()
    raw_score = 0.0
    token_count = 0

    for token in tokenize(text):
        token_count += 1

        if token in NEGATORS:
            state.on_negator()
            continue

        if token in INTENSIFIERS:
            state.on_intensifier()
            continue

        score = word_score(token)
        if score:
            raw_score += state.on_scored(score)
        else:
            state.on_unscored()

    if token_count == 0:
        return 0.0

    normalized = raw_score / math.sqrt(token_count)
    return round(max(-1.0, min(1.0, normalized)), 4)
