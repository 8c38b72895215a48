"""
Analysis app exceptions

Error taxonomy shared by the pipeline, the document extractor and the
session store. Every error carries a stable ``kind`` and a message that is
safe to show to the caller.
"""


class CareerFitError(Exception):
    """
    Base class for every failure the API reports to callers.
    """

    kind = "INTERNAL_ERROR"
    status_code = 500
    default_message = "Something went wrong while processing the request."

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class InvalidRequest(CareerFitError):
    """
    Caller supplied input the pipeline refuses to send to the provider.
    """

    kind = "INVALID_REQUEST"
    status_code = 400
    default_message = "The request is missing required information."


class UnsupportedFormat(CareerFitError):
    kind = "UNSUPPORTED_FORMAT"
    status_code = 415
    default_message = "Unsupported file type. Please upload a PDF or Word document."


class ExtractionFailed(CareerFitError):
    kind = "EXTRACTION_FAILED"
    status_code = 422
    default_message = "Could not extract enough text from the uploaded resume."


class ProviderUnavailable(CareerFitError):
    """
    No credential is configured for the completion provider.

    Raised before any network traffic so the caller can show a degraded-mode
    message instead of a transport error.
    """

    kind = "PROVIDER_UNAVAILABLE"
    status_code = 503
    default_message = "The AI provider is not configured. Please contact the operator."


class ProviderError(CareerFitError):
    """
    Transport, timeout or remote failure while calling the provider.
    """

    kind = "PROVIDER_ERROR"
    status_code = 502
    default_message = "The AI provider failed to respond. Please try again."


class ResponseParseError(CareerFitError):
    """
    The provider replied, but not with the structure that was asked for.
    """

    kind = "RESPONSE_PARSE_ERROR"
    status_code = 502
    default_message = "The AI response could not be read. Please try again."


class NoJsonFound(ResponseParseError):
    kind = "NO_JSON_FOUND"
    default_message = "The AI response did not contain any JSON. Please try again."


class MalformedJson(ResponseParseError):
    kind = "MALFORMED_JSON"
    default_message = "The AI response contained malformed JSON. Please try again."


class SessionNotFound(CareerFitError):
    kind = "SESSION_NOT_FOUND"
    status_code = 404
    default_message = "Session not found. Please upload your resume again."
