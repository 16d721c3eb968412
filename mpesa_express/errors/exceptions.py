class AppError(Exception):
    status_code = 500
    error = "Application error"
    response_key = "error"

    def __init__(self, message, status_code=None):
        super().__init__(message)
        if status_code:
            self.status_code = status_code
        self.message = message

    def to_dict(self):
        return {self.response_key: self.message}


class ValidationError(AppError):
    status_code = 400
    error = "Validation error"


class MissingFieldsError(ValidationError):
    response_key = "message"


class InvalidPayloadError(AppError):
    status_code = 400
    error = "Invalid payload"

    def __init__(self, message="Invalid JSON", status_code=None):
        super().__init__(message, status_code)


class UpstreamError(AppError):
    status_code = 500
    error = "Upstream error"


class ConfigurationError(Exception):
    """Raised at startup when the relay cannot be configured"""
    pass
