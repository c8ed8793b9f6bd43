# -*- coding: utf-8 -*-
"""Paginated queries over CouchDB databases."""
from couchstore import exceptions
from couchstore.client import Server, Database, Document
from couchstore.query import ById, ByIdList, MangoQuery, ViewQuery
from couchstore.store import CouchStore
