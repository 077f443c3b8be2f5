"""Error taxonomy for the medical imaging agent."""


class MedicalImagingError(Exception):
    """Base class for every failure raised while serving a request."""


class RequestValidationFailure(MedicalImagingError):
    """A required request field is missing or malformed. Answered with HTTP 400."""


class ImageProcessingError(MedicalImagingError):
    """The image payload could not be decoded, opened or resized."""


class InvalidEncodingError(ImageProcessingError):
    """The payload is not a well-formed base64 string."""


class ExternalServiceError(MedicalImagingError):
    """The model provider failed, timed out or returned no usable text."""


class UnhandledInputError(MedicalImagingError):
    """The request is well-formed but cannot be served as given."""


class NoUserMessageError(UnhandledInputError):
    def __init__(self, message: str = "No user message found in conversation"):
        super().__init__(message)
