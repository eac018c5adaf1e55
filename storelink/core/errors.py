class StoreLinkError(Exception):
    """Base class for domain errors raised by the service layer."""


class EntityNotFoundError(StoreLinkError, LookupError):
    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ValidationFailed(StoreLinkError, ValueError):
    """Input rejected; ``errors`` maps field names to messages."""

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{key}: {value}" for key, value in self.errors.items()))


class PreconditionFailed(StoreLinkError):
    """The entity is not in a state that allows the requested action."""


class ActionInProgressError(StoreLinkError):
    """The same action on the same entity is already pending."""
