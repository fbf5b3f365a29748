from __future__ import annotations


class NotFoundError(LookupError):
    """A verification or question id did not resolve in the store."""

    def __init__(self, kind: str, ident: str):
        self.kind = kind
        self.ident = ident
        super().__init__(f"{kind} not found: {ident}")


class StoreUnavailableError(RuntimeError):
    """Connectivity, auth or query failure talking to the question store."""
