"""
Exceptions raised by the compression pipeline.

ValidationError subclasses are client faults and map to HTTP 400.
EncodeFailure is a server fault from the caller's point of view and maps
to HTTP 500 with a generic message.
"""


class CompressionError(Exception):
    """Base class for every pipeline error"""

    status_code = 500
    message = "Internal Server Error during compression."

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(CompressionError):
    """Upload rejected before any decoding work"""

    status_code = 400
    message = "Invalid upload"


class MissingFile(ValidationError):
    message = "No file uploaded"


class SizeExceeded(ValidationError):
    message = "File size exceeds 20MB limit."


class UnsupportedFormat(ValidationError):
    message = "Unsupported file format. Please use JPG, PNG, or WEBP."


class EncodeFailure(CompressionError):
    """Input could not be decoded or re-encoded as its declared format"""
