# app/errors.py
#
# Every scheduling operation fails with exactly one of these. The HTTP layer
# maps them to status codes in app/main.py.


class SchedulingError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(SchedulingError):
    status_code = 404


class ValidationError(SchedulingError):
    status_code = 422


class ConflictError(SchedulingError):
    status_code = 409


class AuthorizationError(SchedulingError):
    status_code = 403
