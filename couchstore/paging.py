"""Lazy iteration over view and Mango results, one HTTP page at a time.

Both iterators validate their arguments when called and only then return a
generator, so bad parameters fail before any request is made. The generators
issue the next page request only after every document of the current page has
been consumed; closing a generator early stops the paging.
"""
import collections
import json
import logging

from couchstore import exceptions, params
from couchstore.client import Document

__all__ = ['ViewPageRequest', 'FindPageRequest', 'iter_view', 'iter_mango', 'log_warning']

LOGGER = logging.getLogger(__name__)

ALL_DOCS = '_all_docs'

# View options copied verbatim into every page request.
_VIEW_OPTIONS = (
    'descending',
    'inclusive_end',
    'sorted',
    'stable',
    'update',
    'update_seq',
    'conflicts',
    'attachments',
    'att_encoding_info',
)

# View range options, only meaningful without a key list.
_RANGE_OPTIONS = ('endkey', 'endkey_docid')

_MANGO_OPTIONS = (
    'sort',
    'fields',
    'use_index',
    'r',
    'conflicts',
    'update',
    'stable',
    'execution_stats',
)


def _copy_options(query, names):
    return dict(
        (name, getattr(query, name))
        for name in names
        if getattr(query, name) is not None
    )


class ViewPageRequest(collections.namedtuple(
        'ViewPageRequest', ['query', 'limit', 'keys', 'cursor', 'skip'])):
    """The request for one page of a view.

    `cursor` is the ``(key, docid)`` of the last row of the previous page,
    or `None` on the first page and in key list mode.
    """
    __slots__ = ()

    @property
    def design_doc(self):
        return self.query.design

    @property
    def view_name(self):
        return self.query.view or ALL_DOCS

    def body(self):
        query = self.query
        body = _copy_options(query, _VIEW_OPTIONS)
        body.update(include_docs=True, reduce=False, group=False, limit=self.limit)
        if self.skip:
            body['skip'] = self.skip

        if self.keys is not None:
            body['keys'] = list(self.keys)
            return body

        body.update(_copy_options(query, _RANGE_OPTIONS))
        if query.key is not None:
            body['startkey'] = body['endkey'] = query.key
        elif query.startkey is not None:
            body['startkey'] = query.startkey
            if query.startkey_docid is not None:
                body['startkey_docid'] = query.startkey_docid
        if self.cursor is not None:
            body['startkey'], body['startkey_docid'] = self.cursor
        return body


class FindPageRequest(collections.namedtuple(
        'FindPageRequest', ['query', 'limit', 'bookmark', 'skip'])):
    """The request for one page of a Mango query."""
    __slots__ = ()

    def body(self):
        body = _copy_options(self.query, _MANGO_OPTIONS)
        body.update(selector=self.query.selector, limit=self.limit)
        if self.skip:
            body['skip'] = self.skip
        if self.bookmark is not None:
            body['bookmark'] = self.bookmark
        return body


def log_warning(database, message):
    """Default sink for the advisory warnings of Mango queries."""
    LOGGER.warning('[%s] %s', database.name, message)


def _key_queue(keys):
    """Return the pending keys of a key list query, duplicates removed."""
    if not isinstance(keys, (list, tuple)):
        raise exceptions.InvalidQuery('View keys must be a list')
    if not keys:
        raise exceptions.InvalidQuery('Expected at least one key')
    queue = collections.deque()
    seen = set()
    for key in keys:
        # keys can be any JSON value, lists and objects included
        marker = json.dumps(key, sort_keys=True)
        if marker not in seen:
            seen.add(marker)
            queue.append(key)
    return queue


def _pull_keys(queue, count):
    return [queue.popleft() for _ in range(min(count, len(queue)))]


def iter_view(database, query, read_size=None):
    """Iterate the documents of a view query.

    Without ``keys`` the view is walked with a ``startkey``/``startkey_docid``
    cursor taken from the last row of each page. With ``keys`` the keys are
    sent in chunks of at most one page; a chunk is read until a short page
    comes back, since a key of a named view may emit several rows. Rows of
    design documents and rows
    without a document are skipped.

    :param database: the `Database` to query
    :param query: a `ViewQuery`
    :param read_size: number of rows to fetch per HTTP request
    :return: a generator of `Document`
    :raise ConfigurationError: if `read_size` or the query limit is invalid
    :raise InvalidQuery: if the key list is empty or mixed with a key range,
                         or ``startkey_docid`` comes without ``startkey``
    """
    read_size = params.parse_read_size(read_size)
    limit = params.parse_limit(query.limit)
    if (query.design is None) != (query.view is None):
        raise exceptions.InvalidQuery('A view query needs both a design document and a view name')
    if query.startkey_docid is not None and query.startkey is None:
        raise exceptions.InvalidQuery('View startkey_docid needs a startkey')
    keys = None
    if query.keys is not None:
        if any(getattr(query, name) is not None for name in ('key', 'startkey', 'endkey')):
            raise exceptions.InvalidQuery('View keys cannot be combined with key, startkey or endkey')
        keys = _key_queue(query.keys)
    elif query.key is not None and (query.startkey is not None or query.endkey is not None):
        raise exceptions.InvalidQuery('View key cannot be combined with startkey or endkey')
    return _iter_view_pages(database, query, read_size, limit, keys)


def _iter_view_pages(database, query, read_size, remaining, keys):
    cursor = None
    chunk = None
    skip = query.skip
    while remaining > 0:
        size = params.page_size(read_size, remaining)
        if keys is not None and chunk is None:
            chunk = _pull_keys(keys, size)
        request = ViewPageRequest(
            query=query,
            limit=size,
            keys=chunk,
            cursor=cursor,
            skip=skip,
        )
        LOGGER.debug('requesting %s rows from %s/%s', size, database.name, request.view_name)
        result = database.query_view(request.design_doc, request.view_name, request.body())

        for row in result:
            if row.is_design or row.doc is None:
                continue
            yield Document(row.doc)
            remaining -= 1

        if keys is not None:
            # a key of a named view can emit any number of rows
            if query.design is not None and len(result) >= size:
                skip = (skip or 0) + len(result)
                continue
            if not keys:
                break
            chunk = None
            skip = None
        else:
            if len(result) < size:
                break
            last = result[-1]
            cursor = (last.key, last.id)
            skip = 1


def iter_mango(database, query, read_size=None, on_warning=log_warning):
    """Iterate the documents matching a Mango query.

    Pages are chained with the bookmark returned by the previous page.
    Warnings returned by the server are passed to
    ``on_warning(database, message)`` and never raised.

    :param database: the `Database` to query
    :param query: a `MangoQuery`
    :param read_size: number of documents to fetch per HTTP request
    :param on_warning: callable receiving the server warnings
    :return: a generator of `Document`
    :raise ConfigurationError: if `read_size` or the query limit is invalid
    """
    read_size = params.parse_read_size(read_size)
    limit = params.parse_limit(query.limit)
    return _iter_mango_pages(database, query, read_size, limit, on_warning or log_warning)


def _iter_mango_pages(database, query, read_size, remaining, on_warning):
    bookmark = None
    skip = query.skip
    while remaining > 0:
        size = params.page_size(read_size, remaining)
        request = FindPageRequest(query=query, limit=size, bookmark=bookmark, skip=skip)
        LOGGER.debug('requesting %s documents from %s/_find', size, database.name)
        result = database.find(request.body())
        if result.warning:
            on_warning(database, result.warning)

        for doc in result.docs:
            if doc is None:
                continue
            yield Document(doc)
            remaining -= 1

        if len(result) < size or not result.bookmark:
            break
        bookmark = result.bookmark
        skip = None
