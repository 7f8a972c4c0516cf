"""Pydantic models describing Product payloads."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from catalog_api.utils.attrs_codec import coerce_attr_value


class Product(BaseModel):
    """A catalog entry, identified by its SKU (stock keeping unit).

    Attribute values are always strings; non-string JSON values are coerced
    to their JSON text. Storing a product replaces all of its previous
    attributes.
    """

    sku: str = Field(..., min_length=1, description="Unique SKU")
    attrs: dict[str, str] = Field(default_factory=dict)

    @field_validator("attrs", mode="before")
    @classmethod
    def coerce_attrs(cls, v: Any) -> Any:
        if v is None:
            return {}
        if not isinstance(v, dict):
            return v
        coerced = {}
        for key, value in v.items():
            if isinstance(key, str) and "\x00" in key:
                raise ValueError("attribute keys must not contain U+0000")
            coerced[key] = coerce_attr_value(value)
        return coerced

    def lookup_attr(self, key: str) -> str | None:
        """Return the attribute value, or None when the attribute is undefined.

        Use this instead of get_attr to tell an empty value from a missing one.
        """
        return self.attrs.get(key)

    def get_attr(self, key: str) -> str:
        """Return the attribute value, or an empty string when it is missing."""
        return self.attrs.get(key, "")


class ProductLocation(BaseModel):
    """Body of a successful create/update: where the product can be found."""

    product: str

    @classmethod
    def for_sku(cls, sku: str) -> "ProductLocation":
        return cls(product=f"/products/{sku}/")
