"""
Errors raised by the root analytics engine.

Zero matches for a root is data, not failure, so there is no "not found"
error here: the service answers with an empty but well-formed result.
"""


class AnalyticsError(Exception):
    """Base class for every engine error"""


class InvalidRootError(AnalyticsError, ValueError):
    """The query folds to an empty root"""

    def __init__(self, query):
        self.query = query
        super().__init__(f"Root query {query!r} is empty after normalization")


class CorpusUnavailableError(AnalyticsError, ConnectionError):
    """The corpus source could not be reached or parsed; the service must not start"""


class QueryCancelledError(AnalyticsError):
    """A query was cancelled by its caller between phases"""

    def __init__(self, key, phase):
        self.key = key
        self.phase = phase
        super().__init__(f"Query for root {key!r} cancelled before {phase}")


class CorpusIntegrityError(AnalyticsError, RuntimeError):
    """Corpus / chapter metadata are inconsistent. Fix the data, do not retry."""
