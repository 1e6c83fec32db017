import logging

from errors import InvalidRootError
from models import AnnotatedVerse, OccurrenceSet
from search.root_matcher import is_significant_root, root_key, root_match

logger = logging.getLogger(__name__)


class OccurrenceLocator:
    """Finds every verse carrying a token of a given root."""

    def __init__(self, corpus):
        self.corpus = corpus

    def locate(self, root_query: str) -> OccurrenceSet:
        """
        Scan the corpus in verse order for tokens tagged with ``root_query``.

        Args:
            root_query: root as typed by the user, diacritics and separators allowed

        Returns:
            OccurrenceSet in corpus order; empty (not an error) when nothing matches

        Raises:
            InvalidRootError: the query folds to an empty string
        """
        key = root_key(root_query or "")
        if not key:
            raise InvalidRootError(root_query)

        found = []
        for verse in self.corpus:
            matched = tuple(t for t in verse.tokens if root_match(t, key))
            if not matched:
                continue
            found.append(AnnotatedVerse(
                verse=verse,
                matched_tokens=matched,
                other_roots=self._other_roots(verse, key),
            ))

        logger.debug(f"Root {key}: {len(found)} verses")
        return OccurrenceSet(root=root_query, key=key, verses=tuple(found))

    @staticmethod
    def _other_roots(verse, key):
        seen = {}
        for token in verse.tokens:
            if not token.root:
                continue
            other = root_key(token.root)
            if other == key or not is_significant_root(other):
                continue
            # أول صيغة أصلية للجذر تبقى للعرض
            seen.setdefault(other, token.root)
        return tuple(seen.items())
