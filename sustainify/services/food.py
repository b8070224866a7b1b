"""Food / product category classification from image labels.

Fallback when no brand can be read: the detected labels are matched against
a keyword table and the strongest (label, category) pair is reported.
"""

import re
from typing import Optional, Sequence
import logging

from .results import FoodResult, FoodMethod, round_half_up
from .vision import DetectedLabel

logger = logging.getLogger(__name__)


# Category -> keywords and how strongly a match counts
FOOD_CATEGORIES = {
    "Beverages": {
        "keywords": ["drink", "beverage", "soda", "juice", "water", "cola", "beer", "wine", "coffee", "tea",
                     "smoothie", "shake", "lemonade", "sports drink", "energy drink"],
        "weight": 1.0,
    },
    "Snack Foods": {
        "keywords": ["chip", "crisp", "snack", "cracker", "pretzel", "popcorn", "nuts", "trail mix", "granola bar"],
        "weight": 1.0,
    },
    "Confectionery": {
        "keywords": ["chocolate", "candy", "sweet", "gum", "mint", "lollipop", "caramel", "fudge", "truffle", "bonbon"],
        "weight": 1.0,
    },
    "Dairy Products": {
        "keywords": ["milk", "cheese", "yogurt", "butter", "cream", "ice cream", "frozen yogurt", "pudding"],
        "weight": 0.9,
    },
    "Baked Goods": {
        "keywords": ["bread", "cake", "cookie", "biscuit", "muffin", "donut", "pastry", "bagel", "croissant"],
        "weight": 0.9,
    },
    "Packaged Foods": {
        "keywords": ["cereal", "pasta", "sauce", "soup", "canned", "frozen meal", "instant", "ready meal"],
        "weight": 0.8,
    },
    "Fresh Produce": {
        "keywords": ["fruit", "vegetable", "apple", "banana", "orange", "lettuce", "tomato", "potato", "fresh"],
        "weight": 0.7,
    },
    "Meat & Seafood": {
        "keywords": ["meat", "chicken", "beef", "pork", "fish", "seafood", "turkey", "ham", "bacon", "sausage"],
        "weight": 0.8,
    },
    "Condiments & Seasonings": {
        "keywords": ["sauce", "dressing", "condiment", "spice", "seasoning", "salt", "pepper", "vinegar", "oil"],
        "weight": 0.7,
    },
    "Personal Care": {
        "keywords": ["shampoo", "soap", "lotion", "toothpaste", "deodorant", "skincare", "cosmetic"],
        "weight": 0.6,
    },
    "Household Items": {
        "keywords": ["detergent", "cleaner", "tissue", "paper", "cleaning", "laundry"],
        "weight": 0.5,
    },
}

GENERAL_CATEGORY = "General Product"

EXACT_MATCH_STRENGTH = 1.0
PARTIAL_MATCH_STRENGTH = 0.8


def capitalize_words(text: str) -> str:
    """Title-case each word: 'potato CHIPS' -> 'Potato Chips'."""
    if not text:
        return ""
    return re.sub(r"\b\w+", lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def identify_food_type(labels: Sequence[DetectedLabel]) -> Optional[FoodResult]:
    """
    Classify the product from its image labels.

    Every keyword contained in a label scores
    ``label score * category weight * match strength * 100`` (strength 1.0 for
    an exact label, 0.8 for a substring). Without any keyword hit, the
    highest-scoring label itself is returned as a general product.
    """
    if not labels:
        return None

    best: Optional[FoodResult] = None
    best_score = 0.0

    for label in labels:
        description = label.description.lower()
        for category, data in FOOD_CATEGORIES.items():
            for keyword in data["keywords"]:
                if keyword not in description:
                    continue
                strength = EXACT_MATCH_STRENGTH if description == keyword else PARTIAL_MATCH_STRENGTH
                score = label.score * data["weight"] * strength * 100
                if score > best_score:
                    best_score = score
                    best = FoodResult(
                        name=capitalize_words(description),
                        category=category,
                        confidence=round_half_up(score),
                        method=FoodMethod.ENHANCED_CATEGORIZATION,
                    )

    if best is None:
        top = max(labels, key=lambda l: l.score)
        best = FoodResult(
            name=capitalize_words(top.description),
            category=GENERAL_CATEGORY,
            confidence=round_half_up(top.score * 100),
            method=FoodMethod.FALLBACK_LABEL,
        )

    logger.info(f"Food classification: {best.name} in {best.category} ({best.confidence}%)")
    return best
