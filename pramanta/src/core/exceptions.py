"""Custom exceptions for the Pramanta chat pipeline."""


class PramantaError(Exception):
    """Base exception for every pipeline failure surfaced to clients."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(PramantaError):
    """Raised when the category or query fails validation."""

    pass


class CategoryNotFoundError(PramantaError):
    """Raised when a category has no backing data file."""

    def __init__(self, category: str, message: str) -> None:
        super().__init__(message)
        self.category = category


class CategoryParseError(PramantaError):
    """Raised when a category data file cannot be decoded or tokenised."""

    def __init__(self, category: str, message: str) -> None:
        super().__init__(message)
        self.category = category


class TemplateError(PramantaError):
    """Raised when a category prompt template cannot be read."""

    def __init__(self, category: str, message: str) -> None:
        super().__init__(message)
        self.category = category


class GenerationError(PramantaError):
    """Raised when the Gemini call fails."""

    pass


class GenerationOverloadError(GenerationError):
    """Raised when Gemini stays overloaded after every retry."""

    pass


class RequestTimeoutError(PramantaError):
    """Raised when a chat request exceeds its outer timeout."""

    pass
