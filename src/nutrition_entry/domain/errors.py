"""Error types raised at the engine's boundaries."""


class SearchUnavailable(RuntimeError):
    """The remote food search failed, timed out, or returned unusable data."""


class PersistenceError(RuntimeError):
    """A read or write against the durable store failed."""
