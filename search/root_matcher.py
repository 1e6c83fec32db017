from search.text_normalizer import normalize

# roots shorter than this are particles / broken tags, not lexical roots
MIN_ROOT_LENGTH = 3


def root_key(root: str) -> str:
    return normalize(root)


def root_match(token, key: str) -> bool:
    """True when the token's tagged root folds to ``key``."""
    return bool(token.root) and root_key(token.root) == key


def is_significant_root(key: str) -> bool:
    return len(key) >= MIN_ROOT_LENGTH
