"""Failure kinds raised by the food analysis pipeline."""


class AnalysisError(Exception):
    """Base class for food analysis failures."""

    default_message = "Failed to analyze image"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class UnsupportedMediaTypeError(AnalysisError):
    """Upload is not declared as an image."""

    default_message = "File must be an image"


class PayloadTooLargeError(AnalysisError):
    """Upload exceeds the size ceiling."""

    default_message = "Image file is too large. Maximum size is 10MB."


class InvalidImageDataError(AnalysisError):
    """Encoded image payload is empty or not valid base64."""

    default_message = "Invalid base64 image data"


class MissingCredentialError(AnalysisError):
    """Vision provider credential is not configured."""

    default_message = "Vision API key is not configured"


class EmptyResponseError(AnalysisError):
    """Vision provider returned no text."""

    default_message = "Empty response from vision API"


class MalformedResponseError(AnalysisError):
    """Vision provider text is not valid JSON."""

    default_message = "Failed to parse JSON response from vision API"


class MissingFoodsFieldError(AnalysisError):
    """Parsed response has no foods array."""

    default_message = "Response missing 'foods' array"


class UpstreamError(AnalysisError):
    """Vision provider call failed."""

    default_message = "Vision API request failed"


class UpstreamRateLimitedError(UpstreamError):
    """Vision provider quota or rate limit hit."""

    default_message = "API quota exceeded. Please try again later."


class UpstreamSafetyBlockedError(UpstreamError):
    """Vision provider refused the image on safety grounds."""

    default_message = (
        "Image was blocked by safety filters. Please try a different image."
    )


class UpstreamAuthError(UpstreamError):
    """Vision provider rejected the credential."""

    default_message = "Vision API key is invalid or missing"
