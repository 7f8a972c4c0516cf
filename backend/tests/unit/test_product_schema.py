import pytest
from pydantic import ValidationError

from catalog_api.api.schemas.product import Product, ProductLocation


class TestProduct:
    def test_parse_wire_format(self):
        product = Product.model_validate_json('{"sku":"widget-1","attrs":{"color":"red"}}')
        assert product.sku == "widget-1"
        assert product.attrs == {"color": "red"}

    def test_attrs_default_to_empty(self):
        assert Product(sku="widget-1").attrs == {}
        assert Product.model_validate_json('{"sku":"widget-1","attrs":null}').attrs == {}

    def test_attribute_values_coerced_to_strings(self):
        product = Product.model_validate_json('{"sku":"w","attrs":{"qty":3,"new":true}}')
        assert product.attrs == {"qty": "3", "new": "true"}

    @pytest.mark.parametrize(
        "body",
        [
            "{",
            "[]",
            '{"attrs":{}}',
            '{"sku":""}',
            '{"sku":"w","attrs":"color=red"}',
            '{"sku":"w","attrs":{"bad\\u0000key":"x"}}',
        ],
    )
    def test_invalid_bodies(self, body):
        with pytest.raises(ValidationError):
            Product.model_validate_json(body)

    def test_serializes_to_wire_format(self):
        product = Product(sku="widget-1", attrs={"color": "red"})
        assert product.model_dump_json() == '{"sku":"widget-1","attrs":{"color":"red"}}'

    def test_attr_accessors(self):
        product = Product(sku="w", attrs={"color": "red", "note": ""})
        assert product.lookup_attr("color") == "red"
        assert product.lookup_attr("note") == ""
        assert product.lookup_attr("size") is None
        assert product.get_attr("color") == "red"
        assert product.get_attr("size") == ""


def test_product_location():
    assert ProductLocation.for_sku("widget-1").model_dump() == {"product": "/products/widget-1/"}
