from collections.abc import Callable, Mapping
from typing import Any

import attrs
import cattrs
from cattrs.gen import make_dict_structure_fn, make_dict_unstructure_fn, override

from ...utils import snake_to_camel_case


def _camel_case_overrides(cl: type) -> dict[str, Any]:
    return {
        a.name: override(rename=snake_to_camel_case(a.name))
        for a in attrs.fields(cl)
    }


def make_gateway_converter() -> cattrs.Converter:
    """Converter between the attrs models and the JSON bodies of the gateway.

    Attribute names of models are renamed between snake_case and camelCase.
    Values that are not attrs classes, like the key/value pairs of map
    annotations, keep their shape.
    """
    converter = cattrs.Converter()

    def structure_fn(cl: type) -> Callable[[Mapping[str, Any], Any], Any]:
        return make_dict_structure_fn(cl, converter, **_camel_case_overrides(cl))

    def unstructure_fn(cl: type) -> Callable[[Any], dict[str, Any]]:
        return make_dict_unstructure_fn(cl, converter, **_camel_case_overrides(cl))

    converter.register_structure_hook_factory(attrs.has, structure_fn)
    converter.register_unstructure_hook_factory(attrs.has, unstructure_fn)
    return converter


custom_converter = make_gateway_converter()
