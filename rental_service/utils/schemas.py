from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE
from rental_service.models import FulfillmentMode


class BookingRequestSchema(Schema):
    """Schema for creating bookings"""

    class Meta:
        unknown = EXCLUDE

    customer_name = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    customer_email = fields.Email(required=True)
    customer_phone = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    rental_type = fields.Str(required=True, validate=validate.Length(min=1))
    start_date = fields.Date(required=True)
    pickup_delivery = fields.Str(
        required=True,
        validate=validate.OneOf([mode.value for mode in FulfillmentMode])
    )
    delivery_address = fields.Str(allow_none=True, load_default=None, validate=validate.Length(max=500))
    notes = fields.Str(allow_none=True, load_default=None, validate=validate.Length(max=1000))

    @validates_schema
    def validate_delivery_address(self, data, **kwargs):
        if data.get('pickup_delivery') == FulfillmentMode.DELIVERY.value:
            address = data.get('delivery_address')
            if not address or not address.strip():
                raise ValidationError('Delivery address required for delivery', 'delivery_address')


class AvailabilityQuerySchema(Schema):
    """Schema for availability query parameters"""

    class Meta:
        unknown = EXCLUDE

    start = fields.Date(load_default=None)
    end = fields.Date(load_default=None)
    type = fields.Str(load_default=None)
