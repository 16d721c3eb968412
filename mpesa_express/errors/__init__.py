from mpesa_express.errors.exceptions import (
    AppError,
    ValidationError,
    MissingFieldsError,
    InvalidPayloadError,
    UpstreamError,
    ConfigurationError,
)

__all__= [
    'AppError',
    'ValidationError',
    'MissingFieldsError',
    'InvalidPayloadError',
    'UpstreamError',
    'ConfigurationError',
]
