# src/models/errors.py

"""Exception hierarchy shared by the engine, storage and AI bridge."""


class EcoShopError(Exception):
    """Base class for every error raised on purpose by ecoshop."""


class NotFound(EcoShopError):
    """A referenced product id is absent from the catalog."""


class ValidationError(EcoShopError):
    """Malformed input: a bad catalog record, an empty description, etc."""


class ComputationError(EcoShopError):
    """A derived metric cannot be computed (e.g. division by a zero price)."""


class AIError(EcoShopError):
    """Base class for failures of the AI collaborator round-trip."""


class UpstreamError(AIError):
    """The generation service errored, was unreachable, or timed out."""


class ParseError(AIError):
    """The AI response held no decodable structured payload."""
