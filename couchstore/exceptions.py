class CouchDBException(Exception):
    """There was an ambiguous error interacting with CouchDB."""
    pass


class UpdateConflict(CouchDBException):
    """A revision conflict occurred."""
    pass


class MissingResource(CouchDBException):
    """A requested resource (database, document, view) does not exist"""
    pass


class MissingDatabase(MissingResource):
    """A requested database does not exist."""
    pass


class DatabaseExists(CouchDBException):
    """Could not create a database, it exists already."""
    pass


class MultipleResultsFound(CouchDBException):
    """A single-result lookup produced more than one document."""
    pass


class PurgeNotSupported(CouchDBException, NotImplementedError):
    """Purging was requested from a store that does not allow it."""
    pass


class ConfigurationError(CouchDBException, ValueError):
    """A pagination parameter is invalid."""
    pass


class InvalidReadSize(ConfigurationError):
    """The read size is not a positive integer."""
    pass


class InvalidLimit(ConfigurationError):
    """The query limit is neither a positive integer nor unbounded."""
    pass


class QueryError(CouchDBException, ValueError):
    """A query value could not be turned into a query."""
    pass


class InvalidQuery(QueryError):
    """A query has unknown, missing or malformed fields."""
    pass


class AmbiguousQuery(QueryError):
    """A query matches more than one query shape."""
    pass


class RequestsException(CouchDBException):
    """There was an ambiguous exception that occurred while handling your request."""
    pass


class Timeout(RequestsException):
    """The request timed out."""
    pass


class HTTPError(RequestsException):
    """An HTTP error occurred."""
    def __init__(self, status_code, message=None):
        self.status_code = status_code
        self.message = message or "HTTP error {status_code}".format(status_code=status_code)
        super(HTTPError, self).__init__(self.message)


class HTTPBadRequest(HTTPError):
    """400 Bad Request"""
    status_code = 400

    def __init__(self, message="Bad Request"):
        super(HTTPBadRequest, self).__init__(self.__class__.status_code, message)


class HTTPUnauthorized(HTTPError):
    """401 Unauthorized"""
    status_code = 401

    def __init__(self, message="Unauthorized"):
        super(HTTPUnauthorized, self).__init__(self.__class__.status_code, message)


class HTTPForbidden(HTTPError):
    """403 Forbidden"""
    status_code = 403

    def __init__(self, message="Forbidden"):
        super(HTTPForbidden, self).__init__(self.__class__.status_code, message)


class HTTPNotFound(HTTPError):
    """404 Not Found"""
    status_code = 404

    def __init__(self, message="Not Found"):
        super(HTTPNotFound, self).__init__(self.__class__.status_code, message)


class HTTPConflict(HTTPError):
    """409 Conflict"""
    status_code = 409

    def __init__(self, message="Conflict"):
        super(HTTPConflict, self).__init__(self.__class__.status_code, message)


class HTTPPreconditionFailed(HTTPError):
    """412 Precondition Failed"""
    status_code = 412

    def __init__(self, message="Precondition failed"):
        super(HTTPPreconditionFailed, self).__init__(self.__class__.status_code, message)


_http_error_lookup = {
    exc.status_code: exc for exc in [HTTPBadRequest, HTTPUnauthorized, HTTPForbidden, HTTPNotFound, HTTPConflict, HTTPPreconditionFailed]
}


def http_error_lookup(status_code, message=None):
    """Return the exception instance matching an HTTP status code."""
    if status_code in _http_error_lookup:
        if message:
            return _http_error_lookup[status_code](message)
        return _http_error_lookup[status_code]()
    else:
        return HTTPError(status_code=status_code, message=message)
