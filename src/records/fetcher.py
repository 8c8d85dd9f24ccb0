"""Fetch regional records from the WCA API."""
import logging

import httpx

from .errors import RecordsFetchError
from .models import RECORD_TYPES, Record

logger = logging.getLogger(__name__)

WORLD_RECORD_KEY = "WR"


def parse_records_payload(data: dict) -> list[Record]:
    """Flatten the ``/records`` payload into an ordered list of records.

    World records come first, then continental, then national records,
    each group in the order the API returned it.

    Raises:
        RecordsFetchError: If the payload does not have the expected shape
    """
    if not isinstance(data, dict):
        raise RecordsFetchError("Unexpected records payload: not an object")

    try:
        regions = [(WORLD_RECORD_KEY, data["world_records"])]
        regions += list(data["continental_records"].items())
        regions += list(data["national_records"].items())
    except (KeyError, AttributeError) as e:
        raise RecordsFetchError(f"Unexpected records payload: missing {e}")

    records = []
    for record_key, events in regions:
        try:
            for event_id, results in events.items():
                for record_type in RECORD_TYPES:
                    if results.get(record_type) is not None:
                        records.append(
                            Record(
                                record_key=record_key,
                                event_id=event_id,
                                type=record_type,
                                attempt_result=int(results[record_type]),
                            )
                        )
        except (AttributeError, TypeError, ValueError) as e:
            raise RecordsFetchError(f"Invalid records for {record_key}: {e}")

    return records


class WcaRecordsFetcher:
    """Fetches the full list of regional records from the WCA API."""

    def __init__(
        self,
        api_url: str = "https://www.worldcubeassociation.org/api/v0",
        timeout: float = 30.0,
    ):
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def fetch_regional_records(self) -> list[Record]:
        """Fetch current world, continental and national records.

        Returns:
            Ordered list of records

        Raises:
            RecordsFetchError: If the records cannot be fetched or parsed
        """
        url = f"{self._api_url}/records"
        try:
            resp = httpx.get(url, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise RecordsFetchError(f"WCA API responded with {e.response.status_code}")
        except httpx.HTTPError as e:
            raise RecordsFetchError(f"Error requesting {url}: {e}")
        except ValueError as e:
            raise RecordsFetchError(f"Invalid JSON from {url}: {e}")

        records = parse_records_payload(data)
        logger.debug("Fetched %d records from %s", len(records), url)
        return records
