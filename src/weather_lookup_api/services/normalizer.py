"""Address normalization applied before geocoding."""

import re

from loguru import logger

# Frequently misspelled or renamed place names, alias -> name the geocoder resolves best
PLACE_NAME_CORRECTIONS: dict[str, str] = {
    "hyderbad": "hyderabad",
    "banglore": "bangalore",
    "bengaluru": "bangalore",
    "bombay": "mumbai",
    "calcutta": "kolkata",
    "madras": "chennai",
    "prayagraj": "allahabad",
    "gurgaon": "gurugram",
    "mysore": "mysuru",
    "baroda": "vadodara",
    "trivandrum": "thiruvananthapuram",
    "cochin": "kochi",
    "calicut": "kozhikode",
    "mangalore": "mangaluru",
    "belgaum": "belagavi",
    "gulbarga": "kalaburagi",
    "hubli": "hubballi",
    "bellary": "ballari",
    "bijapur": "vijayapura",
    "shimoga": "shivamogga",
    "tumkur": "tumakuru",
    "chikmagalur": "chikkamagaluru",
    "kodagu": "coorg",
}

_CORRECTION_PATTERNS = [
    (re.compile(rf"\b{re.escape(alias)}\b", re.IGNORECASE), canonical)
    for alias, canonical in PLACE_NAME_CORRECTIONS.items()
]


def normalize_address(address: str) -> str:
    """Lower-case, trim and correct known place-name aliases.

    Only whole words are replaced, so "bombayite" is left alone.

    Example:
        >>> normalize_address("  Bombay, India ")
        'mumbai, india'
        >>> normalize_address("New York, NY")
        'new york, ny'
    """
    original = address.lower().strip()
    corrected = original
    for pattern, canonical in _CORRECTION_PATTERNS:
        corrected = pattern.sub(canonical, corrected)

    if corrected != original:
        logger.info("Corrected address alias", original=address, corrected=corrected)

    return corrected
