"""Failure modes of turning an engine response into a :class:`Recipe`."""


class ExtractionError(Exception):
    """Base class for responses that cannot become a recipe."""


class MalformedResponseError(ExtractionError):
    """The engine answered with something that is not a JSON object."""


class RecipeNotFoundError(ExtractionError):
    """The engine explicitly reported that the content holds no recipe."""


class SchemaViolationError(ExtractionError):
    """Required fields are missing or empty after coercion."""
