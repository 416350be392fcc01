# holdrank/resolver.py — Free-text instrument name → canonical record
import logging
import re
from holdrank.config import CFG, QUERY_SUBSTITUTIONS
from holdrank.data_screener import LiveSourceError
from holdrank.utils import parse_number

logger = logging.getLogger(__name__)


class ResolutionError(RuntimeError):
    """The instrument could not be matched or refreshed."""


def clean_query(name: str) -> str:
    """Search form of a holding name: "Limited" → "Ltd", "Corporation" →
    "Corpn", "and" → "&" (any case), whitespace collapsed."""
    query = str(name or "")
    for pattern, repl in QUERY_SUBSTITUTIONS:
        query = re.sub(pattern, repl, query, flags=re.IGNORECASE)
    return " ".join(query.split())


def market_cap_category(value) -> str:
    """Large / Mid / Small Cap from a market cap in ₹ crore."""
    cap = parse_number(value)
    if cap is None:
        return "Unknown Category"
    if cap >= CFG["large_cap_min"]:
        return "Large Cap"
    if cap >= CFG["mid_cap_min"]:
        return "Mid Cap"
    return "Small Cap"


class InstrumentResolver:
    """Find the canonical record for a holding name.

    The store is a cache: a match scoring at least ``threshold`` is used as
    is, anything weaker triggers a live search, a fresh page extraction and
    an upsert keyed by the directory's own company name. Without a live
    source, a weak cached match is still returned.
    """

    def __init__(self, store, source=None, threshold: float = None):
        self.store = store
        self.source = source
        self.threshold = CFG["relevance_threshold"] if threshold is None else threshold

    def lookup(self, query: str):
        try:
            return self.store.search(query)
        except Exception as e:
            raise ResolutionError(f"store search failed for {query!r}: {e}") from e

    def refresh(self, name: str) -> dict:
        query = clean_query(name)
        try:
            results = self.source.search(query)
            if not results:
                raise ResolutionError(f"no company found for {name!r}")
            top = results[0]
            record = self.source.fetch_company(top["url"])
            record["name"] = top.get("name") or name
        except LiveSourceError as e:
            raise ResolutionError(f"live fetch failed for {name!r}: {e}") from e
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            # search hit or page that does not have the expected shape
            raise ResolutionError(f"malformed live data for {name!r}: {e!r}") from e

        try:
            self.store.upsert(record["name"], record)
        except Exception as e:
            raise ResolutionError(f"store upsert failed for {record['name']!r}: {e}") from e
        logger.info("Successfully updated document for %s", record["name"])
        return record

    def resolve(self, name: str):
        """(record, relevance) for ``name``; raises ``ResolutionError``."""
        query = clean_query(name)
        match = self.lookup(query)
        record, relevance = match if match else (None, 0.0)
        logger.debug("Store match for %r: %s (%.3f)", query,
                     record.get("name") if record else None, relevance)

        if record is not None and relevance >= self.threshold:
            return record, relevance
        if self.source is None:
            if record is None:
                raise ResolutionError(f"no stored record for {name!r}")
            return record, relevance
        return self.refresh(name), relevance
