# SPDX-License-Identifier: Apache-2.0

"""
Keyword-based priority prediction for complaints.

Single-word keywords are counted over tokens; multi-word phrases are matched
as substrings of the lower-cased text and count as two hits each. A category
signal maps the complaint category onto a base tier that acts as a floor.
"""

from typing import Any, Optional, Tuple

from ..models.enums import PriorityTier
from ..models.entities import PriorityPrediction
from .text import tokenize


# Life, safety and infrastructure emergencies
CRITICAL_KEYWORDS = frozenset({
    "death", "died", "dead", "dying", "kill", "killed", "murder", "fire", "explosion",
    "blast", "collapse", "collapsed", "collapsing", "flood", "drowning", "drown",
    "earthquake", "tsunami", "hospital", "ambulance", "electrocution", "gas",
    "terror", "riot", "shooting", "bomb", "trapped", "rescue",
    "emergency", "critical", "lifethreatening", "stroke", "heart", "unconscious",
    "poisoned", "poisoning", "toxic", "outbreak", "epidemic", "plague", "mass",
    "building", "structural", "dangerous", "imminent", "catastrophe",
})

CRITICAL_PHRASES = (
    "gas leak", "electric shock", "no breathing", "not breathing", "building collapse",
    "under collapse", "water contamination", "medical emergency", "life threatening",
    "life-threatening", "mass casualty", "civil unrest", "road accident",
    "bridge collapse", "pipeline burst", "dam break", "oil spill", "sewage burst",
    "power explosion", "transformer fire", "acid attack",
)

# Significant disruption or harm. Words also listed as critical are only
# ever counted as critical.
HIGH_KEYWORDS = frozenset({
    "dangerous", "hazardous", "urgent", "severe", "serious", "violence", "attack",
    "threat", "robbery", "theft", "stolen", "injured", "injury", "injuries", "bleeding",
    "unsafe", "immediate", "accident", "accidents", "hurt", "missing", "blocked",
    "broken", "electricity", "power", "blackout", "shortage", "flooding", "waterlogging",
    "sewage", "overflow", "contaminated", "disease", "spreading", "pothole", "potholes",
    "structural", "damage", "damaged", "outbreak", "harassment", "abuse", "assault",
    "road", "bridge", "leak", "leakage", "burst", "collapsed", "fire", "smoke",
    "critical", "failure", "corrupt", "bribe", "garbage", "waste", "rats", "pests",
    "stray", "manhole", "crack", "cracks", "illegal", "unauthorized",
})

HIGH_PHRASES = (
    "no water", "no electricity", "no power", "water supply", "power cut",
    "road blocked", "road damaged", "missing child", "missing person",
    "unsafe building", "sewage overflow", "water logging", "animal attack",
    "tree fallen", "wall fallen", "manhole open", "open manhole", "garbage dump",
    "garbage not collected", "stray dogs", "stray animals", "drug activity",
    "illegal construction", "unauthorized construction", "accident spot",
)

# Queries, suggestions and non-urgent requests
LOW_KEYWORDS = frozenset({
    "suggestion", "feedback", "minor", "small", "slight", "information", "query",
    "inquiry", "request", "check", "verify", "confirm", "general", "routine",
    "maintenance", "cleaning", "cosmetic", "aesthetic", "enquiry", "asking",
    "wanted", "wondering", "curious", "update", "status", "inform", "notify",
    "guide", "guidance", "direction", "help", "advise", "advice",
})

LOW_PHRASES = (
    "general query", "general inquiry", "general request", "minor issue",
    "small complaint", "feedback only", "want to know", "just asking",
)

# Category substring -> base tier, matched case-insensitively
CATEGORY_BASE_TIERS: Tuple[Tuple[str, PriorityTier], ...] = (
    ("emergency", PriorityTier.CRITICAL),
    ("safety", PriorityTier.CRITICAL),
    ("fire", PriorityTier.CRITICAL),
    ("health", PriorityTier.HIGH),
    ("electricity", PriorityTier.HIGH),
    ("power", PriorityTier.HIGH),
    ("water", PriorityTier.HIGH),
    ("sewage", PriorityTier.HIGH),
    ("sanitation", PriorityTier.HIGH),
    ("drainage", PriorityTier.HIGH),
    ("flood", PriorityTier.HIGH),
    ("infrastructure", PriorityTier.HIGH),
    ("road", PriorityTier.HIGH),
    ("bridge", PriorityTier.HIGH),
    ("transport", PriorityTier.MEDIUM),
    ("environment", PriorityTier.MEDIUM),
    ("education", PriorityTier.MEDIUM),
    ("noise", PriorityTier.MEDIUM),
    ("general", PriorityTier.MEDIUM),
    ("feedback", PriorityTier.LOW),
    ("suggestion", PriorityTier.LOW),
)

PHRASE_WEIGHT = 2
NO_CATEGORY_SIGNAL = -1
CATEGORY_FLOOR_CONFIDENCE = 0.52


def category_tier(category: Any) -> int:
    """
    Resolve the base tier signalled by a category name.

    Args:
        category: Category name; non-string or empty means no signal

    Returns:
        Highest matching tier value, or -1 when nothing matches
    """
    if not isinstance(category, str) or not category:
        return NO_CATEGORY_SIGNAL

    category_lower = category.lower()
    tier = NO_CATEGORY_SIGNAL
    for key, base_tier in CATEGORY_BASE_TIERS:
        if key in category_lower:
            tier = max(tier, int(base_tier))
    return tier


def count_hits(description: str) -> Tuple[int, int, int]:
    """
    Count critical, high and low keyword hits in ``description``.

    Each token counts towards at most one tier, checked critical first.
    Every phrase found anywhere in the text adds two hits to its tier.

    Returns:
        Tuple of (critical_hits, high_hits, low_hits)
    """
    critical_hits = 0
    high_hits = 0
    low_hits = 0

    for word in tokenize(description):
        if word in CRITICAL_KEYWORDS:
            critical_hits += 1
        elif word in HIGH_KEYWORDS:
            high_hits += 1
        elif word in LOW_KEYWORDS:
            low_hits += 1

    full_text = description.lower()
    critical_hits += PHRASE_WEIGHT * sum(1 for phrase in CRITICAL_PHRASES if phrase in full_text)
    high_hits += PHRASE_WEIGHT * sum(1 for phrase in HIGH_PHRASES if phrase in full_text)
    low_hits += PHRASE_WEIGHT * sum(1 for phrase in LOW_PHRASES if phrase in full_text)

    return critical_hits, high_hits, low_hits


def resolve_tier(
    critical_hits: int,
    high_hits: int,
    low_hits: int,
    cat_tier: int
) -> Tuple[int, float]:
    """
    Turn hit counts and a category signal into a tier and confidence.

    Rules are evaluated in order and the first match wins; the category tier
    is then applied as a floor.

    Returns:
        Tuple of (tier value, unrounded confidence)
    """
    if critical_hits >= 1:
        tier = PriorityTier.CRITICAL
        confidence = min(0.97, 0.75 + critical_hits * 0.08)
    elif high_hits >= 3 or (high_hits >= 1 and cat_tier >= PriorityTier.CRITICAL):
        tier = PriorityTier.HIGH
        confidence = min(0.92, 0.65 + high_hits * 0.05)
    elif high_hits >= 1 or cat_tier >= PriorityTier.HIGH:
        tier = PriorityTier.HIGH
        category_bonus = 0.05 if cat_tier >= PriorityTier.HIGH else 0.0
        confidence = min(0.80, 0.55 + high_hits * 0.04 + category_bonus)
    elif low_hits > 0 and high_hits == 0 and critical_hits == 0:
        tier = PriorityTier.MEDIUM if cat_tier >= PriorityTier.MEDIUM else PriorityTier.LOW
        confidence = min(0.85, 0.58 + low_hits * 0.08)
    elif cat_tier >= 0:
        tier = cat_tier
        confidence = 0.55
    else:
        tier = PriorityTier.MEDIUM
        confidence = 0.45

    tier = int(tier)

    # Category is a floor, never a ceiling
    if cat_tier > tier:
        tier = cat_tier
        confidence = max(confidence, CATEGORY_FLOOR_CONFIDENCE)

    tier = max(int(PriorityTier.LOW), min(int(PriorityTier.CRITICAL), tier))
    return tier, confidence


def predict_priority(description: Any, category: Optional[str] = None) -> PriorityPrediction:
    """
    Predict the priority of a complaint from its description and category.

    Args:
        description: Complaint text; empty or non-string input yields (MEDIUM, 0.5)
        category: Optional category name

    Returns:
        PriorityPrediction with confidence rounded to 4 decimal places
    """
    if not isinstance(description, str) or not description:
        return PriorityPrediction(tier=PriorityTier.MEDIUM, confidence=0.5)

    critical_hits, high_hits, low_hits = count_hits(description)
    tier, confidence = resolve_tier(critical_hits, high_hits, low_hits, category_tier(category))

    return PriorityPrediction(
        tier=PriorityTier(tier),
        confidence=round(min(1.0, confidence), 4)
    )
