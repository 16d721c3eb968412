"""
STK Push Callback Schemas
Decodes the asynchronous result notification Safaricom posts to CallBackURL
"""

from marshmallow import Schema, fields, EXCLUDE


class CallbackItemSchema(Schema):
    """Single Name/Value pair from CallbackMetadata.Item"""

    class Meta:
        unknown = EXCLUDE

    Name = fields.Str(load_default="")
    Value = fields.Raw(load_default=None, allow_none=True)


class CallbackMetadataSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    Item = fields.List(fields.Nested(CallbackItemSchema), load_default=list)


class StkCallbackSchema(Schema):
    """Body.stkCallback"""

    class Meta:
        unknown = EXCLUDE

    MerchantRequestID = fields.Str(load_default="")
    CheckoutRequestID = fields.Str(load_default="")
    ResultCode = fields.Int(strict=True, load_default=0)
    ResultDesc = fields.Str(load_default="")
    CallbackMetadata = fields.Nested(CallbackMetadataSchema, load_default=lambda: {"Item": []})


class CallbackBodySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    stkCallback = fields.Nested(StkCallbackSchema, load_default=lambda: StkCallbackSchema().load({}))


class StkCallbackEnvelopeSchema(Schema):
    """Top-level notification: {"Body": {"stkCallback": {...}}}"""

    class Meta:
        unknown = EXCLUDE

    Body = fields.Nested(CallbackBodySchema, load_default=lambda: CallbackBodySchema().load({}))
