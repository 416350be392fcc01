# holdrank/store.py — Document store: text search by name + upsert by name
"""
The resolver only needs two calls from a store:

  search(query) -> (record, relevance) | None   best text match first
  upsert(name, record)                          insert or replace by name

``FileStore`` keeps records in a dict pickled to disk and scores matches
the way MongoDB's text index does for a single field; ``MongoStore`` uses
a real collection with a text index on ``name``. Connections are owned by
the caller.
"""
import copy
import logging
import os
import pickle
import re
from datetime import datetime
from pymongo import MongoClient, TEXT
from pymongo.server_api import ServerApi

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"[a-z0-9]+")


def _tokens(text: str) -> list:
    return _TOKEN.findall(str(text or "").lower())


def text_score(query: str, name: str) -> float:
    """MongoDB-style relevance of ``name`` for ``query``.

    Each distinct query term found in the name adds 0.5 + 0.5 * count / n,
    n being the number of name tokens.
    """
    name_tokens = _tokens(name)
    if not name_tokens:
        return 0.0
    score = 0.0
    for term in set(_tokens(query)):
        count = name_tokens.count(term)
        if count:
            score += 0.5 + 0.5 * count / len(name_tokens)
    return score


class FileStore:
    def __init__(self, path: str = None):
        self.path = path
        self.records = {}
        self.saved_at = None
        if path and os.path.exists(path):
            self._load()

    def _load(self):
        try:
            with open(self.path, "rb") as f:
                self.records, self.saved_at = pickle.load(f)
            logger.info("Store loaded: %d records from %s", len(self.records), self.path)
        except (OSError, pickle.UnpicklingError, ValueError, TypeError, EOFError) as e:
            logger.warning("Store read error (%s): %s, starting empty", self.path, e)
            self.records = {}
            self.saved_at = None

    def save(self):
        if not self.path:
            return
        self.saved_at = datetime.now()
        with open(self.path, "wb") as f:
            pickle.dump((self.records, self.saved_at), f)

    def search(self, query: str):
        best, best_score = None, 0.0
        for name, record in self.records.items():
            s = text_score(query, name)
            if s > best_score:
                best, best_score = record, s
        if best is None:
            return None
        return copy.deepcopy(best), best_score

    def upsert(self, name: str, record: dict):
        doc = dict(self.records.get(name, {}))
        doc.update(record)
        doc["name"] = name
        self.records[name] = doc
        self.save()


class MongoStore:
    """Store backed by a pymongo collection (text index on ``name``)."""

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def connect(cls, uri: str, database: str, collection: str):
        client = MongoClient(uri, server_api=ServerApi("1"))
        client.admin.command("ping")
        coll = client[database][collection]
        coll.create_index([("name", TEXT)])
        logger.info("Connected to MongoDB %s.%s", database, collection)
        return cls(coll)

    def search(self, query: str):
        doc = self.collection.find_one(
            {"$text": {"$search": query}},
            projection={"score": {"$meta": "textScore"}},
            sort=[("score", {"$meta": "textScore"})],
        )
        if doc is None:
            return None
        doc.pop("_id", None)
        return doc, float(doc.pop("score", 0.0) or 0.0)

    def upsert(self, name: str, record: dict):
        fields = {k: v for k, v in record.items() if k != "name"}
        self.collection.update_one({"name": name}, {"$set": fields}, upsert=True)
