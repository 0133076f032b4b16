"""Conversion between plain Python data and XML documents.

The mapping is deliberately small and symmetric for mappings:

* mapping keys become child elements, in insertion order;
* keys starting with ``@`` become attributes, ``#text`` becomes text;
* lists and tuples become repeated sibling elements;
* ``None`` becomes an empty element marked ``xsi:nil="true"``, so it stays
  distinct from the empty string;
* booleans are written ``true``/``false``, every other scalar with
  :func:`str`.

Element and attribute names must be valid XML names and text must only
contain characters XML allows; anything else raises :class:`ValueError`
instead of producing a malformed document.

Decoding reverses this: the root element is dropped, repeated children
are collected into lists, nil elements decode to ``None`` and leaf text
is returned verbatim. All leaf values come back as strings; callers
coerce them through Pydantic.

A single child and an absent one cannot be told apart from a one-item
or empty list by looking at the document alone. :func:`conform` uses the
annotations of the decoding target to restore those lists.
"""

from __future__ import annotations

import dataclasses
import re
import types
import typing
from typing import Any, Mapping, Optional, Union
from xml.etree import ElementTree

from pydantic import BaseModel

from httpkit.models import as_builtin

DEFAULT_ROOT = "root"
_LIST_ITEM = "item"

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
_NIL = f"{{{XSI_NAMESPACE}}}nil"
ElementTree.register_namespace("xsi", XSI_NAMESPACE)

_NAME_START = (
    "A-Z_a-z\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u02ff\u0370-\u037d\u037f-\u1fff"
    "\u200c-\u200d\u2070-\u218f\u2c00-\u2fef\u3001-\ud7ff\uf900-\ufdcf"
    "\ufdf0-\ufffd\U00010000-\U000effff"
)
# Colons are left out: a prefixed name needs a namespace declaration.
_XML_NAME = re.compile(f"[{_NAME_START}][{_NAME_START}\\-.0-9\u00b7\u0300-\u036f\u203f-\u2040]*")
_INVALID_CHAR = re.compile("[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def root_name(value: Any) -> str:
    """Return the root element name for *value*.

    Models and dataclass instances are named after their class, anything
    else gets :data:`DEFAULT_ROOT`.
    """
    if as_builtin(value) is not value:
        return type(value).__name__
    return DEFAULT_ROOT


def to_xml(value: Any, root: Optional[str] = None) -> bytes:
    """Serialise *value* into a UTF-8 XML document with an XML declaration.

    Raises:
        ValueError: If a key is not a valid XML name or a value contains
            characters XML cannot represent.
    """
    element = ElementTree.Element(_checked_name(root or root_name(value)))
    _fill(element, as_builtin(value))
    return ElementTree.tostring(element, encoding="utf-8", xml_declaration=True)


def from_xml(data: bytes) -> Any:
    """Parse an XML document and return the content of its root element.

    Raises:
        xml.etree.ElementTree.ParseError: If *data* is not well-formed XML.
    """
    return _element_value(ElementTree.fromstring(data))


def conform(data: Any, target: Any) -> Any:
    """Reshape decoded XML *data* to the containers *target* annotates.

    Fields typed as lists, tuples or sets get a lone value wrapped in a
    list, and an empty list when the element is absent. Nested models,
    dataclasses and list items are handled recursively. Values are not
    coerced; that is left to Pydantic.
    """
    if _is_sequence(_strip_optional(target)) and data is not None:
        # A top-level list is written as <item> children of the root.
        if data == "":
            return []
        if isinstance(data, dict) and set(data) == {_LIST_ITEM}:
            data = data[_LIST_ITEM]
    return _conform(data, target)


def _conform(data: Any, target: Any) -> Any:
    target = _strip_optional(target)
    if _is_sequence(target):
        if data is None:
            return []
        args = [arg for arg in typing.get_args(target) if arg is not Ellipsis]
        items = data if isinstance(data, list) else [data]
        return [_conform(item, args[0]) for item in items] if args else items

    fields = _field_types(target)
    if fields is None:
        return data
    if data == "":
        # An element with no content decodes to "", i.e. an empty object.
        data = {}
    if not isinstance(data, dict):
        return data
    shaped = dict(data)
    for name, annotation in fields.items():
        if name in shaped:
            shaped[name] = _conform(shaped[name], annotation)
        elif _is_sequence(_strip_optional(annotation)):
            shaped[name] = []
    return shaped


# ------------------------------------------------------------------ #
# Encoding
# ------------------------------------------------------------------ #


def _fill(element: ElementTree.Element, value: Any) -> None:
    value = as_builtin(value)
    if value is None:
        element.set(_NIL, "true")
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            key = str(key)
            if key.startswith("@"):
                element.set(_checked_name(key[1:]), _scalar(item))
            elif key == "#text":
                element.text = _scalar(item)
            elif isinstance(item, (list, tuple)):
                for entry in item:
                    _fill(ElementTree.SubElement(element, _checked_name(key)), entry)
            else:
                _fill(ElementTree.SubElement(element, _checked_name(key)), item)
        return
    if isinstance(value, (list, tuple)):
        for entry in value:
            _fill(ElementTree.SubElement(element, _LIST_ITEM), entry)
        return
    element.text = _scalar(value)


def _checked_name(name: str) -> str:
    if not _XML_NAME.fullmatch(name):
        raise ValueError(f"{name!r} is not a valid XML element or attribute name")
    return name


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, bytes):
        text = value.decode("utf-8")
    else:
        text = str(value)
    bad = _INVALID_CHAR.search(text)
    if bad:
        raise ValueError(f"Character {bad.group()!r} cannot be represented in XML")
    return text


# ------------------------------------------------------------------ #
# Decoding
# ------------------------------------------------------------------ #


def _element_value(element: ElementTree.Element) -> Any:
    if element.get(_NIL) == "true":
        return None
    children = list(element)
    attributes = {name: value for name, value in element.attrib.items() if name != _NIL}
    if not children and not attributes:
        return element.text or ""

    result: dict[str, Any] = {f"@{name}": value for name, value in attributes.items()}
    for child in children:
        value = _element_value(child)
        if child.tag not in result:
            result[child.tag] = value
        elif isinstance(result[child.tag], list):
            result[child.tag].append(value)
        else:
            result[child.tag] = [result[child.tag], value]
    # Text between child elements is layout; a leaf keeps its text as-is.
    text = element.text or ""
    if children:
        text = text.strip()
    if text:
        result["#text"] = text
    return result


# ------------------------------------------------------------------ #
# Target introspection
# ------------------------------------------------------------------ #


def _strip_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (Union, types.UnionType):
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _is_sequence(annotation: Any) -> bool:
    origin = typing.get_origin(annotation) or annotation
    return isinstance(origin, type) and issubclass(origin, _SEQUENCE_TYPES)


def _field_types(target: Any) -> Optional[dict[str, Any]]:
    if isinstance(target, type) and issubclass(target, BaseModel):
        return {name: field.annotation for name, field in target.model_fields.items()}
    if isinstance(target, type) and dataclasses.is_dataclass(target):
        try:
            return typing.get_type_hints(target)
        except (NameError, TypeError):
            return {field.name: field.type for field in dataclasses.fields(target)}
    return None
