"""Query shapes understood by `couchstore.store.CouchStore`.

A query is one of four immutable variants:

- `ById`: a single document identifier;
- `ByIdList`: a list of identifiers, looked up through ``_all_docs``;
- `MangoQuery`: a ``_find`` selector;
- `ViewQuery`: a design document view, or ``_all_docs`` when no view is named.

Callers may build the variants directly, or pass plain values that
`classify` converts:

>>> classify('johndoe')
ById(id='johndoe')
>>> classify(['johndoe', 'maryjane'])
ByIdList(ids=('johndoe', 'maryjane'), limit=None)
>>> classify({'selector': {'type': 'Person'}}).selector
{'type': 'Person'}
>>> classify({'design': 'people', 'view': 'by_name'}).view
'by_name'
"""
import collections
from collections.abc import Mapping

from couchstore import exceptions

__all__ = ['ById', 'ByIdList', 'MangoQuery', 'ViewQuery', 'classify']


ById = collections.namedtuple("ById", ["id"])

ByIdList = collections.namedtuple("ByIdList", ["ids", "limit"], defaults=[None])

MangoQuery = collections.namedtuple(
    "MangoQuery",
    [
        "selector",
        "sort",
        "fields",
        "use_index",
        "r",
        "conflicts",
        "update",
        "stable",
        "skip",
        "limit",
        "execution_stats",
    ],
    defaults=[None] * 10,
)

ViewQuery = collections.namedtuple(
    "ViewQuery",
    [
        "design",
        "view",
        "key",
        "keys",
        "startkey",
        "startkey_docid",
        "endkey",
        "endkey_docid",
        "inclusive_end",
        "descending",
        "skip",
        "limit",
        "sorted",
        "stable",
        "update",
        "update_seq",
        "conflicts",
        "attachments",
        "att_encoding_info",
    ],
    defaults=[None] * 19,
)

QUERY_TYPES = (ById, ByIdList, MangoQuery, ViewQuery)

# Fields that only make sense for a view; seeing one next to a selector
# means the caller mixed up the two shapes.
_VIEW_ONLY_FIELDS = frozenset(ViewQuery._fields) - frozenset(MangoQuery._fields)


def _is_id_list(value):
    return isinstance(value, (list, tuple))


def _build(query_type, fields):
    unknown = sorted(set(fields) - set(query_type._fields))
    if unknown:
        raise exceptions.InvalidQuery(
            'Unknown %s fields: %s' % (query_type.__name__, ', '.join(map(str, unknown))))
    return query_type(**fields)


def _classify_mapping(value):
    fields = dict(value)
    if 'selector' in fields:
        mixed = sorted(_VIEW_ONLY_FIELDS.intersection(fields))
        if mixed:
            raise exceptions.AmbiguousQuery(
                'Query has a selector and view fields: %s' % ', '.join(mixed))
        if not isinstance(fields['selector'], Mapping):
            raise exceptions.InvalidQuery('Mango selector must be a mapping')
        return _build(MangoQuery, fields)

    design, view = fields.get('design'), fields.get('view')
    if (design is None) != (view is None):
        raise exceptions.InvalidQuery('A view query needs both a design document and a view name')
    return _build(ViewQuery, fields)


def classify(value):
    """Turn a caller supplied query value into a query variant.

    :param value: a query variant, a document ID, a list of document IDs,
                  a mapping of query fields, or `None` for all documents
    :return: one of `ById`, `ByIdList`, `MangoQuery` or `ViewQuery`
    :raise AmbiguousQuery: if the mapping has both a selector and view fields
    :raise InvalidQuery: if the value cannot be a query
    """
    if isinstance(value, QUERY_TYPES):
        return value
    if isinstance(value, str):
        return ById(value)
    if _is_id_list(value):
        if not all(isinstance(item, str) for item in value):
            raise exceptions.InvalidQuery('Document ID lists may only contain strings')
        return ByIdList(tuple(value))
    if value is None:
        return ViewQuery()
    if isinstance(value, Mapping):
        return _classify_mapping(value)
    raise exceptions.InvalidQuery('Unsupported query type: %s' % type(value).__name__)


def with_limit(query, limit):
    """Return a copy of `query` with its limit replaced."""
    if isinstance(query, ById):
        return query
    return query._replace(limit=limit)


def as_view_query(query):
    """Express an ID list lookup as an ``_all_docs`` view query."""
    if isinstance(query, ByIdList):
        return ViewQuery(keys=list(query.ids), limit=query.limit)
    return query
