"""Exceptions raised by the detection pipeline."""


class DetectionError(Exception):
    """Base class for every failure of a detection request."""


class DetectionServiceError(DetectionError):
    """The detection service could not be reached or rejected the request."""


class ResponseParseError(DetectionError):
    """The service response did not contain parseable JSON."""


class SchemaMismatchError(DetectionError):
    """The parsed JSON did not match the schema expected for the detection type."""


class StaleResultError(DetectionError):
    """The session changed while the request was in flight."""

    def __init__(self, request_epoch: int, current_epoch: int) -> None:
        super().__init__(f"Discarding result from epoch {request_epoch}, session is at epoch {current_epoch}")
        self.request_epoch = request_epoch
        self.current_epoch = current_epoch
