"""Fast rejection of text that is obviously not a brand name."""

import re

# Quantities printed on packaging: "330ml", "12oz", "250cal", "5%"
MEASUREMENT_PATTERN = re.compile(r"\d+(ml|oz|g|lb|cal|%)")

# Nutrition panel / date stamp vocabulary (matched on lowercased text)
LABEL_VOCABULARY_PATTERN = re.compile(r"(ingredients|nutrition|facts|expires|best before|use by)")

NUMERIC_PATTERN = re.compile(r"\d+")
BARCODE_PATTERN = re.compile(r"\d{8,}")
URL_PREFIX_PATTERN = re.compile(r"(www\.|http|\.com)")

MIN_BRAND_LENGTH = 2


def is_obviously_not_brand(text: str) -> bool:
    """
    Return True when text cannot plausibly be a brand name.

    Only clear-cut junk is rejected (measurements, nutrition labels, numbers,
    barcodes, URLs). Anything borderline passes so real brands are not lost.
    """
    lower = text.lower()
    return bool(
        MEASUREMENT_PATTERN.search(text)
        or LABEL_VOCABULARY_PATTERN.search(lower)
        or len(text) < MIN_BRAND_LENGTH
        or NUMERIC_PATTERN.fullmatch(text)
        or BARCODE_PATTERN.fullmatch(text)
        or URL_PREFIX_PATTERN.match(lower)
    )
