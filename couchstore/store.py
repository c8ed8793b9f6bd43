"""Document store backed by one CouchDB database.

>>> store = CouchStore('python-tests')
>>> doc = store.create({'_id': 'johndoe', 'type': 'Person', 'name': 'John Doe'})
>>> store.find('johndoe')['name']
'John Doe'
>>> [doc.id for doc in store.filter({'selector': {'type': 'Person'}})]
['johndoe']
>>> store.delete(doc).deleted
True
"""
import logging

from couchstore import exceptions, paging, params, query as queries
from couchstore.client import DEFAULT_BASE_URL, Server

__all__ = ['CouchStore']

LOGGER = logging.getLogger(__name__)


class CouchStore(object):
    """Query and write the documents of a CouchDB database.

    Queries can be given as a document ID, a list of document IDs, a Mango
    query mapping (with a ``selector``), a view query mapping (with
    ``design`` and ``view``, or neither for ``_all_docs``), or directly as
    one of the `couchstore.query` variants.
    """

    def __init__(self, database_name, url=None, server=None, allow_purge=False, on_warning=None):
        """Initialize the store.

        :param database_name: the name of the database
        :param url: the URI of the server, defaults to ``COUCHDB_URL``
        :param server: an initialized `Server`, has precedence over `url`
        :param allow_purge: whether `delete` may purge documents
        :param on_warning: callable receiving ``(database, message)`` for
                           every warning returned by a Mango query
        """
        if not isinstance(database_name, str):
            raise TypeError('Database name must be a string')
        if server is None:
            server = Server(url or DEFAULT_BASE_URL)
        self.database_name = database_name
        self.allow_purge = allow_purge
        self.on_warning = on_warning or paging.log_warning
        self._database = server.database(database_name)

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.database_name)

    @property
    def database(self):
        """The underlying `Database`."""
        return self._database

    def read_doc(self, id):
        """Return the document with the given ID, or `None` if it does not exist."""
        return self._database.get(id)

    def write_doc(self, doc):
        """Create or update a document; set ``_deleted`` to delete it.

        :return: the written document with its new revision
        """
        return self._database.upsert(doc)

    def find(self, query=None, read_size=None):
        """Return the one document matching `query`, or `None`.

        :raise MultipleResultsFound: if more than one document was produced
        """
        query = queries.classify(query)
        params.parse_read_size(read_size)
        if isinstance(query, queries.ById):
            return self.read_doc(query.id)

        params.parse_limit(query.limit)
        found = None
        for doc in self.filter(queries.with_limit(query, 1), read_size=read_size):
            if found is not None:
                raise exceptions.MultipleResultsFound('Expected one document at most')
            found = doc
        return found

    def filter(self, query=None, read_size=None):
        """Return an iterator over the documents matching `query`.

        The query and `read_size` are validated immediately; pages are
        requested lazily while the iterator is consumed.
        """
        query = queries.classify(query)
        params.parse_read_size(read_size)
        if isinstance(query, queries.ById):
            return self._iter_one(query.id)
        if isinstance(query, queries.MangoQuery):
            return self.filter_mango(query, read_size=read_size)
        return self.filter_view(queries.as_view_query(query), read_size=read_size)

    def _iter_one(self, id):
        doc = self.read_doc(id)
        if doc is not None:
            yield doc

    def filter_view(self, query, read_size=None):
        """Iterate the documents of a view query."""
        query = queries.classify(query)
        if not isinstance(query, queries.ViewQuery):
            raise exceptions.InvalidQuery('Expected a view query')
        return paging.iter_view(self._database, query, read_size=read_size)

    def filter_mango(self, query, read_size=None):
        """Iterate the documents of a Mango query."""
        query = queries.classify(query)
        if not isinstance(query, queries.MangoQuery):
            raise exceptions.InvalidQuery('Expected a Mango query')
        return paging.iter_mango(self._database, query, read_size=read_size,
                                 on_warning=self.on_warning)

    def create(self, doc):
        return self.write_doc(doc)

    def update(self, doc):
        return self.write_doc(doc)

    def delete(self, doc, purge=False):
        """Delete a document.

        By default a tombstone is written. With `purge` the revision is
        removed for good, which the store must have been allowed to do.

        :raise PurgeNotSupported: if `purge` is requested but not allowed
        """
        if purge:
            if not self.allow_purge:
                raise exceptions.PurgeNotSupported('Purging is not enabled for %r' % self.database_name)
            LOGGER.info('purging %s@%s from %s', doc['_id'], doc['_rev'], self.database_name)
            self._database.purge(doc['_id'], doc['_rev'])
            return doc
        tombstone = dict(doc)
        tombstone['_deleted'] = True
        return self.write_doc(tombstone)
