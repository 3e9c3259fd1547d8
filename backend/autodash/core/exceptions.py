"""
Dataset error kinds.

Only preconditions that make a request impossible are raised. Values that
fail numeric/date coercion and range filters with ambiguous types are
recovered where they occur and never surface as exceptions.
"""


class DatasetError(Exception):
    """Base class for errors surfaced to the caller of the profiling core."""

    error = "dataset_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class EmptyDatasetError(DatasetError):
    """No rows were given to the profiler."""

    error = "empty_dataset"


class InvalidPayloadError(DatasetError):
    """Uploaded content could not be decoded into rows."""

    error = "invalid_payload"


class UnsupportedFileError(DatasetError):
    """Uploaded file has an extension the ingestion layer does not read."""

    error = "unsupported_file"
