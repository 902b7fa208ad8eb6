"""Error taxonomy shared by every service.

Each error carries a stable machine-readable ``kind`` and the HTTP status the
routers render it with. Validation errors are raised before the store is
touched, so they never leave partial writes behind.
"""


class BootyHuntError(Exception):
    kind = "internal"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": {"kind": self.kind, "message": self.message}}


class ValidationError(BootyHuntError):
    kind = "validation"
    http_status = 400


class NotFoundError(BootyHuntError):
    kind = "not_found"
    http_status = 404


class ConflictError(BootyHuntError):
    kind = "conflict"
    http_status = 409


class StorageError(BootyHuntError):
    kind = "storage"
    http_status = 500


class StoreBusyError(StorageError):
    kind = "storage_busy"
    http_status = 503


class InternalError(BootyHuntError):
    kind = "internal"
    http_status = 500
