# holdrank/data_screener.py — Live company directory: search, page, peers
import logging
import time
from urllib.parse import urljoin
import requests
from holdrank.config import CFG, HTTP_HEADERS, PEERS_PATH, SEARCH_PATH
from holdrank.extract import parse_company_page, parse_peers

logger = logging.getLogger(__name__)


class LiveSourceError(RuntimeError):
    """Transport or protocol failure talking to the live source."""


class ScreenerClient:
    """Thin HTTP client for the company directory.

    Every request is bounded by ``CFG["http_timeout"]``; non-2xx answers and
    undecodable bodies surface as ``LiveSourceError``.
    """

    def __init__(self, base_url: str = None, session=None, timeout: float = None,
                 sleep_peers: float = None):
        self.base_url = (base_url or CFG["company_url"]).rstrip("/")
        self.session  = session or requests.Session()
        self.timeout  = CFG["http_timeout"] if timeout is None else timeout
        self.sleep_peers = CFG["sleep_peers"] if sleep_peers is None else sleep_peers

    def _get(self, url: str, params: dict = None) -> requests.Response:
        try:
            resp = self.session.get(url, params=params, headers=HTTP_HEADERS,
                                    timeout=self.timeout)
        except requests.RequestException as e:
            raise LiveSourceError(f"request to {url} failed: {e}") from e
        if resp.status_code != 200:
            logger.error("HTTP %s from %s: %.200s", resp.status_code, url, resp.text)
            raise LiveSourceError(f"HTTP {resp.status_code} from {url}")
        return resp

    def search(self, query: str) -> list:
        """Candidate companies as [{"id", "name", "url"}], best first."""
        resp = self._get(self.base_url + SEARCH_PATH,
                         params={"q": query, "v": "3", "fts": "1"})
        try:
            results = resp.json()
        except ValueError as e:
            raise LiveSourceError(f"malformed search response for {query!r}") from e
        if not isinstance(results, list):
            raise LiveSourceError(f"unexpected search payload for {query!r}")
        return [r for r in results
                if isinstance(r, dict) and isinstance(r.get("url"), str) and r["url"]]

    def fetch_peers(self, warehouse_id: str):
        time.sleep(self.sleep_peers)
        url = self.base_url + PEERS_PATH.format(warehouse_id=warehouse_id)
        return parse_peers(self._get(url).text)

    def fetch_company(self, locator: str) -> dict:
        """Freshly extracted record fields for the company page at ``locator``.

        A failing peer fetch leaves the record without peers rather than
        failing the whole company.
        """
        if not isinstance(locator, str) or not locator:
            raise LiveSourceError(f"bad company locator {locator!r}")
        url = urljoin(self.base_url + "/", locator)
        record = parse_company_page(self._get(url).text)
        if "marketCap" not in record:
            raise LiveSourceError(f"no key ratios found at {url}")
        record["url"] = url

        warehouse_id = record.pop("_warehouse_id", None)
        if warehouse_id:
            try:
                record["peers"], record["peersTable"] = self.fetch_peers(warehouse_id)
            except LiveSourceError as e:
                logger.warning("Peers unavailable for %s: %s", url, e)
        return record
