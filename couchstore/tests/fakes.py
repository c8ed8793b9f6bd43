# -*- coding: utf-8 -*-
"""An in-memory CouchDB standing in for `couchstore.session.Session`."""
import collections
import copy
import uuid
from urllib.parse import unquote

from couchstore import exceptions


Request = collections.namedtuple("Request", ["method", "path", "params", "body"])


class FakeResponse(object):

    def __init__(self, data):
        self._data = data

    def json(self):
        return copy.deepcopy(self._data)


def _not_found(reason="missing"):
    return exceptions.http_error_lookup(404, "not_found: " + reason)


def _in_range(row_key, row_id, body):
    """Whether a ``(key, id)`` view row lies within the requested range."""
    descending = body.get("descending", False)
    before = (lambda a, b: a > b) if descending else (lambda a, b: a < b)

    if "startkey" in body:
        start, start_id = body["startkey"], body.get("startkey_docid")
        if before(row_key, start):
            return False
        if row_key == start and start_id is not None and before(row_id, start_id):
            return False
    if "endkey" in body:
        end, end_id = body["endkey"], body.get("endkey_docid")
        if before(end, row_key):
            return False
        if row_key == end:
            if end_id is not None and before(end_id, row_id):
                return False
            if not body.get("inclusive_end", True) and (end_id is None or row_id == end_id):
                return False
    return True


class FakeCouch(object):
    """Serve the handful of CouchDB endpoints the library talks to.

    Every request is recorded in `requests`. Set `ignore_limit` to make
    ``_find`` misbehave and return every match on the first page, and
    `find_warning` to attach a warning to ``_find`` responses.
    """

    def __init__(self, base_url=None):
        self.base_url = base_url
        self.databases = {}
        self.views = {}
        self.requests = []
        self.ignore_limit = False
        self.find_warning = None

    def add_database(self, name, docs=()):
        self.databases[name] = {}
        for doc in docs:
            self._write(name, dict(doc))
        return self.databases[name]

    def add_view(self, db, design, view, map_fn):
        """Register ``map_fn(doc) -> iterable of (key, value)`` as a view."""
        self.views[(db, design, view)] = map_fn

    def requests_to(self, suffix):
        return [r for r in self.requests if r.path.endswith(suffix)]

    # Session interface

    def request(self, method, url, params=None, json=None, **kwargs):
        segments = [unquote(segment) for segment in str(url).split("/") if segment]
        self.requests.append(Request(method, "/".join(segments), dict(params or {}), copy.deepcopy(json)))
        return FakeResponse(self._dispatch(method, segments, params or {}, copy.deepcopy(json)))

    def head(self, url, **kwargs):
        return self.request("HEAD", url, **kwargs)

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)

    def put(self, url, data=None, json=None, **kwargs):
        return self.request("PUT", url, json=json, **kwargs)

    def post(self, url, data=None, json=None, **kwargs):
        return self.request("POST", url, json=json, **kwargs)

    def delete(self, url, **kwargs):
        return self.request("DELETE", url, **kwargs)

    # Endpoints

    def _dispatch(self, method, segments, params, body):
        db = segments[0]
        if len(segments) == 1:
            return self._database(method, db, body)
        if db not in self.databases:
            raise _not_found("Database does not exist.")
        if segments[1:] == ["_all_docs"]:
            return self._all_docs(db, body)
        if segments[1:] == ["_find"]:
            return self._find(db, body)
        if segments[1:] == ["_purge"]:
            return self._purge(db, body)
        if len(segments) == 5 and segments[1] == "_design" and segments[3] == "_view":
            return self._view(db, segments[2], segments[4], body)
        if len(segments) == 2:
            doc_id = segments[1]
            if method == "GET":
                doc = self.databases[db].get(doc_id)
                if doc is None or doc.get("_deleted"):
                    raise _not_found("deleted" if doc else "missing")
                return doc
            if method == "PUT":
                doc = dict(body or {})
                doc["_id"] = doc_id
                if "rev" in params:
                    doc["_rev"] = params["rev"]
                return self._write(db, doc)
        raise exceptions.http_error_lookup(400)

    def _database(self, method, db, body):
        exists = db in self.databases
        if method == "PUT":
            if exists:
                raise exceptions.http_error_lookup(412)
            self.databases[db] = {}
            return {"ok": True}
        if not exists:
            raise _not_found("Database does not exist.")
        if method == "DELETE":
            del self.databases[db]
            return {"ok": True}
        if method == "POST":
            doc = dict(body or {})
            doc["_id"] = uuid.uuid4().hex
            return self._write(db, doc)
        return {"db_name": db, "doc_count": len(self.databases[db])}

    def _write(self, db, doc):
        docs = self.databases[db]
        current = docs.get(doc["_id"])
        if current is not None and not current.get("_deleted"):
            if doc.get("_rev") != current["_rev"]:
                raise exceptions.http_error_lookup(409)
        elif doc.get("_rev") and (current is None or doc["_rev"] != current["_rev"]):
            raise exceptions.http_error_lookup(409)

        generation = int(current["_rev"].split("-")[0]) if current else 0
        doc["_rev"] = "%d-%s" % (generation + 1, uuid.uuid4().hex)
        if doc.get("_deleted"):
            doc = {"_id": doc["_id"], "_rev": doc["_rev"], "_deleted": True}
        docs[doc["_id"]] = doc
        return {"ok": True, "id": doc["_id"], "rev": doc["_rev"]}

    def _live_docs(self, db):
        return [doc for doc in self.databases[db].values() if not doc.get("_deleted")]

    def _page(self, rows, body):
        skip = body.get("skip") or 0
        rows = rows[skip:]
        if "limit" in body:
            rows = rows[:body["limit"]]
        return rows

    def _all_docs(self, db, body):
        body = body or {}
        docs = self.databases[db]
        include_docs = body.get("include_docs", False)
        if "keys" in body:
            rows = []
            for key in body["keys"]:
                doc = docs.get(key)
                if doc is None:
                    rows.append({"key": key, "error": "not_found"})
                elif doc.get("_deleted"):
                    rows.append({"id": key, "key": key, "value": {"rev": doc["_rev"], "deleted": True}, "doc": None})
                else:
                    row = {"id": key, "key": key, "value": {"rev": doc["_rev"]}}
                    if include_docs:
                        row["doc"] = copy.deepcopy(doc)
                    rows.append(row)
            return {"total_rows": len(self._live_docs(db)), "offset": None, "rows": self._page(rows, body)}

        emitted = [(doc["_id"], doc["_id"], {"rev": doc["_rev"]}, doc) for doc in self._live_docs(db)]
        return self._view_response(db, emitted, body)

    def _view(self, db, design, view, body):
        map_fn = self.views.get((db, design, view))
        if map_fn is None or "_design/" + design not in self.databases[db]:
            raise _not_found("missing_named_view")
        emitted = []
        for doc in self._live_docs(db):
            if doc["_id"].startswith("_design/"):
                continue
            for key, value in map_fn(doc):
                emitted.append((key, doc["_id"], value, doc))
        body = body or {}
        if "keys" in body:
            rows = []
            for key in body["keys"]:
                rows.extend(row for row in self._rows(emitted, body, False) if row["key"] == key)
            return {"total_rows": len(emitted), "offset": 0, "rows": self._page(rows, body)}
        return self._view_response(db, emitted, body)

    def _rows(self, emitted, body, ranged=True):
        emitted = sorted(emitted, key=lambda row: (row[0], row[1]), reverse=bool(body.get("descending")))
        rows = []
        for key, doc_id, value, doc in emitted:
            if ranged and not _in_range(key, doc_id, body):
                continue
            row = {"id": doc_id, "key": key, "value": value}
            if body.get("include_docs"):
                row["doc"] = copy.deepcopy(doc)
            rows.append(row)
        return rows

    def _view_response(self, db, emitted, body):
        rows = self._rows(emitted, body)
        return {"total_rows": len(emitted), "offset": 0, "rows": self._page(rows, body)}

    def _find(self, db, body):
        selector = body["selector"]
        matches = sorted(
            (
                doc for doc in self._live_docs(db)
                if not doc["_id"].startswith("_design/")
                and all(doc.get(field) == value for field, value in selector.items())
            ),
            key=lambda doc: doc["_id"],
        )
        bookmark = body.get("bookmark")
        if bookmark:
            matches = [doc for doc in matches if doc["_id"] > bookmark[len("bm-"):]]
        matches = matches[body.get("skip") or 0:]
        if not self.ignore_limit:
            matches = matches[:body.get("limit", 25)]
        if body.get("fields"):
            docs = [dict((f, doc[f]) for f in body["fields"] if f in doc) for doc in matches]
        else:
            docs = [copy.deepcopy(doc) for doc in matches]
        response = {"docs": docs, "bookmark": "bm-" + matches[-1]["_id"] if matches else "nil"}
        if self.find_warning:
            response["warning"] = self.find_warning
        return response

    def _purge(self, db, body):
        purged = {}
        for doc_id, revs in body.items():
            doc = self.databases[db].get(doc_id)
            if doc is not None and doc["_rev"] in revs:
                del self.databases[db][doc_id]
                purged[doc_id] = [doc["_rev"]]
        return {"purge_seq": None, "purged": purged}
