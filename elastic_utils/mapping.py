"""
Declarative definition of elastic field and index mappings

Mappings are plain dicts in the shape elastic expects, so they can be passed to the
index functions as is. They are built once at startup and should be treated as immutable:
all functions in this module return a new dict and never change their arguments.

    widget_mapping = define_mapping("widget", {
        "name": string_field_mapping,
        "description": define_field_mapping("text", stored),
        "size": define_field_mapping("integer", doc_values),
    })
"""

import copy
from datetime import datetime, timezone
from typing import Any, Callable, Literal, Mapping, Optional, get_args

FieldMapping = dict[str, Any]
FieldModifier = Callable[[Mapping[str, Any]], FieldMapping]

FieldType = Literal["string", "text", "date", "double", "float", "integer", "boolean"]

DATE_FORMAT = "yyyy-MM-dd'T'HH:mm:ssZ||yyyy-MM-dd'T'HH:mm:ss.SSSZ"

BASE_FIELD_MAPPINGS: Mapping[str, FieldMapping] = {
    # exact match, not split into terms
    "string": {"type": "string", "index": "not_analyzed"},
    "text": {
        "type": "string",
        # split into multiple terms using the analyzer
        "index": "analyzed",
        # norms are only used for relevance scoring, which we don't need
        "omit_norms": "true",
        # split on whitespace without stemming
        "analyzer": "whitespace",
        # don't store term positions or frequencies
        "index_options": "docs",
    },
    "date": {"type": "date", "format": DATE_FORMAT},
    "double": {"type": "double"},
    "float": {"type": "float"},
    "integer": {"type": "integer"},
    # load the field data cache at index time rather than on the first query
    "boolean": {"type": "boolean", "fielddata": {"loading": "eager"}},
}


def stored(field_mapping: Mapping[str, Any]) -> FieldMapping:
    """Modifies a mapping to indicate that it should be stored"""
    return {**field_mapping, "store": "yes"}


def not_indexed(field_mapping: Mapping[str, Any]) -> FieldMapping:
    """Modifies a mapping to indicate that it should not be indexed and thus is not searchable"""
    return {**field_mapping, "index": "no"}


def doc_values(field_mapping: Mapping[str, Any]) -> FieldMapping:
    """
    Modifies a mapping to use doc values instead of the field data cache for this field.
    This is slightly slower, but the field no longer takes up memory in the field data cache.
    Only use doc values for fields which need a lot of memory and are not frequently used for sorting.
    """
    return {**field_mapping, "doc_values": True}


def define_field_mapping(field_type: FieldType, *modifiers: FieldModifier) -> FieldMapping:
    """
    Create the mapping for a field of the given type, with the modifiers (stored, not_indexed, doc_values)
    applied in order. The modifiers touch disjoint attributes, so their order does not matter.
    """
    if field_type not in BASE_FIELD_MAPPINGS:
        options = ", ".join(get_args(FieldType))
        raise ValueError(f"{field_type!r} is not a valid field type. Choose one of {{{options}}}")
    mapping = copy.deepcopy(BASE_FIELD_MAPPINGS[field_type])
    for modifier in modifiers:
        mapping = modifier(mapping)
    return mapping


string_field_mapping = define_field_mapping("string")
text_field_mapping = define_field_mapping("text")
date_field_mapping = define_field_mapping("date")
double_field_mapping = define_field_mapping("double")
float_field_mapping = define_field_mapping("float")
int_field_mapping = define_field_mapping("integer")
bool_field_mapping = define_field_mapping("boolean")


def define_mapping(
    type_name: str, properties: Mapping[str, Mapping[str, Any]], settings: Optional[Mapping[str, Any]] = None
) -> dict[str, Any]:
    """
    Define the mapping for a document type. By default the mapping is strict (unknown fields are rejected),
    _source and _all are disabled and _ttl is enabled. Settings can override these or add other top level
    mapping properties.
    """
    mapping = {
        "dynamic": "strict",
        "_source": {"enabled": False},
        "_all": {"enabled": False},
        "_ttl": {"enabled": True},
        "properties": copy.deepcopy(dict(properties)),
    }
    mapping.update(copy.deepcopy(dict(settings or {})))
    return {type_name: mapping}


def define_nested_mapping(
    properties: Mapping[str, Mapping[str, Any]], settings: Optional[Mapping[str, Any]] = None
) -> dict[str, Any]:
    """
    Define a nested mapping, to be used as a field mapping inside another mapping.
    Settings can add top level properties, but nested mappings are always strict with _source and _all disabled.
    """
    mapping = copy.deepcopy(dict(settings or {}))
    mapping.update(
        {
            "type": "nested",
            "dynamic": "strict",
            "_source": {"enabled": False},
            "_all": {"enabled": False},
            "properties": copy.deepcopy(dict(properties)),
        }
    )
    return mapping


def date_to_elastic(date: Optional[datetime]) -> Optional[str]:
    """
    Format a datetime for indexing in a date field, in UTC with milliseconds, e.g. 2020-01-02T03:04:05.000Z.
    Naive datetimes are assumed to be UTC already.
    """
    if date is None:
        return None
    if date.utcoffset() is not None:
        date = date.astimezone(timezone.utc).replace(tzinfo=None)
    return date.isoformat(timespec="milliseconds") + "Z"
