"""Domain errors."""


class DomainError(Exception):
    """Base domain error."""


class MissingReferenceError(DomainError):
    """A county references an unknown state, or a record an unknown county."""

    def __init__(self, kind: str, ref_id: int, referenced_by: str) -> None:
        self.kind = kind
        self.ref_id = ref_id
        self.referenced_by = referenced_by
        super().__init__(f"Unknown {kind} id {ref_id} referenced by {referenced_by}")


class UnknownDimensionError(DomainError, LookupError):
    """Dimension id not present in its table."""


class InvalidPayloadError(DomainError):
    """Raw payload does not have the expected structure."""
