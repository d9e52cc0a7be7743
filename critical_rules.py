from typing import List

# Phrases that mark a completion as urgent. Matching is a plain substring test,
# so "not severe" still counts as severe.
CRITICAL_KEYWORDS = (
    "seek immediate medical attention",
    "life-threatening",
    "emergency",
    "hospital",
    "urgent care",
    "severe",
    "risk of death",
    "heart attack",
    "stroke",
)


def matched_keywords(text: str) -> List[str]:
    text = text.lower()
    return [kw for kw in CRITICAL_KEYWORDS if kw in text]


def is_critical(text: str) -> bool:
    return bool(matched_keywords(text))
