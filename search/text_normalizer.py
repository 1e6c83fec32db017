import re

# التشكيل + علامات المصحف + التطويل
ARABIC_DIACRITICS = re.compile(r"[\u0610-\u061A\u064B-\u065F\u0670\u06D6-\u06ED\u0640]")
ALEF_VARIANTS = re.compile(r"[\u0622\u0623\u0625\u0671]")
# anything that is not an Arabic letter or whitespace
NON_LETTERS = re.compile(r"[^\u0621-\u063A\u0641-\u064A\u0671-\u06D3\u06D5\s]")


def normalize(text: str) -> str:
    """Fold an Arabic string for equality comparison (stored text is never touched)."""
    if not text:
        return ""
    text = ARABIC_DIACRITICS.sub("", text)
    text = ALEF_VARIANTS.sub("ا", text)
    text = NON_LETTERS.sub("", text)
    return text.strip()
