import urllib.request
import urllib.parse
import urllib.error
import json
import time
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple

from shared.utils.config import Settings, get_settings

from .errors import SourceAPIError

logger = logging.getLogger(__name__)


class OpenStatesClient:
    """Client for the Open States v3 API (bills, people, jurisdictions)"""

    # /people returns 10 results per page by default, so chunks never need paging
    PEOPLE_CHUNK_SIZE = 10
    # Hard per_page cap enforced by the /bills endpoint
    MAX_PAGE_SIZE = 20

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize Open States client"""
        settings = settings or get_settings()
        self.api_key = api_key or getattr(settings, "openstates_api_key", None)
        if not self.api_key:
            raise ValueError("OPENSTATES_API_KEY not found in environment or settings")

        self.base_url = getattr(settings, "openstates_base_url", None) or "https://v3.openstates.org"
        self.base_url = self.base_url.rstrip("/")
        self.request_count = 0
        self.last_request_time = 0
        self.min_request_interval = getattr(settings, "source_min_request_interval", 0.1)
        self._throttle_lock = threading.Lock()

    @staticmethod
    def build_query(params: Optional[Dict[str, Any]]) -> List[Tuple[str, str]]:
        """
        Flatten a parameter map into query pairs.

        List values become repeated keys (id=a&id=b). A string ``include`` is
        split on commas and repeated the same way, since the API rejects
        comma-joined include directives.
        """
        pairs: List[Tuple[str, str]] = []
        for key, value in (params or {}).items():
            if value is None:
                continue
            if isinstance(value, (list, tuple, set)):
                pairs.extend((key, str(item)) for item in value)
            elif key == "include" and isinstance(value, str):
                pairs.extend(
                    (key, item.strip()) for item in value.split(",") if item.strip()
                )
            else:
                pairs.append((key, str(value)))
        return pairs

    def _throttle(self) -> None:
        with self._throttle_lock:
            time_since_last = time.time() - self.last_request_time
            if time_since_last < self.min_request_interval:
                time.sleep(self.min_request_interval - time_since_last)
            self.last_request_time = time.time()
            self.request_count += 1

    def fetch(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a resource from the Open States API.

        Args:
            path: Resource path (e.g., '/bills', '/jurisdictions/ca')
            params: Query parameters; list values are sent as repeated keys

        Returns:
            Decoded JSON document

        Raises:
            SourceAPIError: on a non-2xx status or a transport failure.
                No retry is attempted here; retry policy belongs to the caller.
        """
        self._throttle()

        query_string = urllib.parse.urlencode(self.build_query(params))
        full_url = f"{self.base_url}{path}"
        if query_string:
            full_url = f"{full_url}?{query_string}"

        request = urllib.request.Request(
            full_url,
            headers={"X-API-KEY": self.api_key, "Accept": "application/json"},
        )

        logger.debug(f"Calling Open States API: {path} with params: {params}")
        try:
            response = urllib.request.urlopen(request, timeout=30)
            data = json.loads(response.read())
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            logger.error(f"Open States API error response ({e.code}): {body}")
            raise SourceAPIError(e.code, body) from e
        except urllib.error.URLError as e:
            logger.error(f"Open States API request failed: {e.reason}")
            raise SourceAPIError(None, str(e.reason)) from e
        except json.JSONDecodeError as e:
            logger.error(f"JSON decode error: {e}")
            raise SourceAPIError(None, f"Invalid JSON: {e}") from e

        return data

    def get_bills(
        self,
        jurisdiction: str,
        limit: int = 50,
        include: Iterable[str] = ("sponsorships", "abstracts"),
        updated_since: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch up to ``limit`` bills for a jurisdiction, following pagination

        Args:
            jurisdiction: Two-letter state code (any case)
            limit: Maximum number of bills to return
            include: Related objects to embed in each bill
            updated_since: Only bills updated on/after this timestamp, oldest first

        Returns:
            List of raw bill dictionaries
        """
        per_page = max(1, min(limit, self.MAX_PAGE_SIZE))
        params: Dict[str, Any] = {
            "jurisdiction": jurisdiction.lower(),
            "per_page": per_page,
            "include": list(include),
        }
        if updated_since:
            params["updated_since"] = updated_since
            params["sort"] = "updated_asc"

        bills: List[Dict[str, Any]] = []
        page = 1
        while len(bills) < limit:
            data = self.fetch("/bills", {**params, "page": page})
            results = data.get("results") or []
            bills.extend(results)

            max_page = (data.get("pagination") or {}).get("max_page", page)
            if not results or page >= max_page:
                break
            page += 1

        logger.info(f"Fetched {len(bills[:limit])} bills for {jurisdiction.upper()}")
        return bills[:limit]

    def get_people_by_ids(
        self,
        person_ids: Iterable[str],
        chunk_size: Optional[int] = None,
    ) -> Dict[str, Dict[str, Any]]:
        """
        Batch-fetch full person records, one request per chunk of IDs.

        A chunk that fails is logged and skipped so the remaining chunks
        still contribute; callers fall back to their own stub data for any
        ID missing from the returned map.

        Args:
            person_ids: Open States person IDs (duplicates are ignored)
            chunk_size: IDs per request (default: PEOPLE_CHUNK_SIZE)

        Returns:
            Mapping of person ID to person record
        """
        chunk_size = chunk_size or self.PEOPLE_CHUNK_SIZE
        ids = list(dict.fromkeys(pid for pid in person_ids if pid))  # dedupe
        people: Dict[str, Dict[str, Any]] = {}
        total_chunks = (len(ids) + chunk_size - 1) // chunk_size

        for i in range(0, len(ids), chunk_size):
            chunk = ids[i : i + chunk_size]
            logger.debug(
                f"Fetching people chunk {i // chunk_size + 1}/{total_chunks} ({len(chunk)} legislators)"
            )
            try:
                data = self.fetch(
                    "/people",
                    {"id": chunk, "include": ["offices", "links"], "per_page": len(chunk)},
                )
                for person in data.get("results") or []:
                    if person.get("id"):
                        people[person["id"]] = person
            except SourceAPIError as e:
                logger.error(f"Error fetching people chunk starting at index {i}: {e}")
                continue

        logger.info(f"Received full details for {len(people)}/{len(ids)} legislators")
        return people

    def get_jurisdiction(self, code: str) -> Dict[str, Any]:
        """
        Get a single jurisdiction with its legislative sessions

        Args:
            code: Jurisdiction code as accepted by the API (e.g., 'ca')
        """
        logger.debug(f"Fetching jurisdiction {code}...")
        return self.fetch(
            f"/jurisdictions/{urllib.parse.quote(code, safe=':/')}",
            {"include": ["legislative_sessions"]},
        )
