"""Custom column types."""

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

from catalog_api.utils.attrs_codec import decode_attrs, encode_attrs


class AttrsJSON(TypeDecorator):
    """Attribute bag stored as JSON text, passed through the attrs codec."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return encode_attrs(value).decode("utf-8")

    def process_result_value(self, value, dialect):
        if isinstance(value, str):
            value = value.encode("utf-8")
        return decode_attrs(value)
