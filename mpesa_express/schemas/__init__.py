"""
Schemas Package
Marshmallow schemas for request validation
"""

from mpesa_express.schemas.callback_schema import (
    CallbackItemSchema,
    CallbackMetadataSchema,
    StkCallbackSchema,
    StkCallbackEnvelopeSchema
)

__all__ = [
    'CallbackItemSchema',
    'CallbackMetadataSchema',
    'StkCallbackSchema',
    'StkCallbackEnvelopeSchema'
]
