"""
Error taxonomy

Every failure the pipeline can classify is an HttpError subclass carrying
the HTTP status it maps to and the errorType tag written to documents
and responses.
"""

from summarizer.config.constants import (
    HTTP_BAD_GATEWAY,
    HTTP_BAD_REQUEST,
    HTTP_GATEWAY_TIMEOUT,
    HTTP_INTERNAL_ERROR,
    HTTP_PAYLOAD_TOO_LARGE,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_UNSUPPORTED_MEDIA_TYPE,
)


class HttpError(Exception):
    status: int = HTTP_INTERNAL_ERROR
    error_type: str = 'Error'

    def __init__(self, message: str, status: int | None = None, error_type: str | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        if error_type is not None:
            self.error_type = error_type


class InvalidRequestError(HttpError):
    status = HTTP_BAD_REQUEST
    error_type = 'ValidationError'


class UnsupportedContentTypeError(HttpError):
    status = HTTP_UNSUPPORTED_MEDIA_TYPE
    error_type = 'UnsupportedContentType'


class FetchTimeoutError(HttpError):
    status = HTTP_GATEWAY_TIMEOUT
    error_type = 'FetchTimeout'


class FetchError(HttpError):
    status = HTTP_BAD_GATEWAY
    error_type = 'FetchError'


class UpstreamHttpError(HttpError):
    status = HTTP_BAD_GATEWAY
    error_type = 'UpstreamHttpError'


class ResponseTooLargeError(HttpError):
    status = HTTP_PAYLOAD_TOO_LARGE
    error_type = 'ResponseTooLarge'


class SupremeLandingError(HttpError):
    status = HTTP_BAD_GATEWAY
    error_type = 'SupremeLandingError'


class SupremeSearchError(HttpError):
    status = HTTP_BAD_GATEWAY
    error_type = 'SupremeSearchError'


class SupremeEmptyResultError(HttpError):
    status = HTTP_BAD_GATEWAY
    error_type = 'SupremeEmptyResult'


class ForcedFailureError(HttpError):
    status = HTTP_BAD_GATEWAY
    error_type = 'ForcedFailure'


class MisconfigurationError(HttpError):
    status = HTTP_INTERNAL_ERROR
    error_type = 'MisconfigurationError'


class StorageQueryError(HttpError):
    status = HTTP_SERVICE_UNAVAILABLE
    error_type = 'StorageQueryError'


class StorageWriteError(HttpError):
    status = HTTP_SERVICE_UNAVAILABLE
    error_type = 'StorageWriteError'


def classify_error(error: BaseException | None) -> str:
    # errorType tag for any exception, classified or not
    if error is None:
        return 'UnknownError'
    return getattr(error, 'error_type', None) or type(error).__name__ or 'Error'


def error_status(error: BaseException) -> int:
    status = getattr(error, 'status', None)
    return status if isinstance(status, int) else HTTP_INTERNAL_ERROR


def error_message(error: BaseException) -> str:
    return str(error) or 'Unexpected error'
