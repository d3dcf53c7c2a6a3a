'''
Client for the remote workforce API: nurse directory and availability
read/write endpoints.
'''
from datetime import date, timedelta
from typing import Any, Optional

import httpx # Using httpx for async requests
from pydantic import ValidationError

from ..common.config import settings
from ..common.exceptions import AvailabilityFetchError, AvailabilitySaveError
from ..common.logger import log
from ..models.availability import NurseOption, RangeRecord


class AvailabilityClient:
    """
    Talks to the workforce API, which wraps every response in a
    {"success": bool, "data": ...} envelope.
    Read failures raise AvailabilityFetchError, write failures AvailabilitySaveError.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS

    def _availability_url(self, nurse_id: int) -> str:
        return f"{self.base_url}/nurses/{nurse_id}/availability"

    # --- Reads ---

    async def list_nurses(self) -> list[NurseOption]:
        """Fetches the nurse directory, reduced to what the selector shows."""
        url = f"{self.base_url}/nurses"
        log.info("Fetching nurse directory.")
        data = await self._get(url, params=None)

        nurses = []
        for item in data:
            try:
                nurses.append(NurseOption(
                    worker_id=item["worker_id"],
                    display_name=(item.get("user") or {}).get("name") or item.get("display_name") or str(item["worker_id"])
                ))
            except (KeyError, TypeError, ValidationError) as e:
                log.warning(f"Skipping malformed nurse entry ({e}): {item}")
        return nurses

    async def fetch_week(self, nurse_id: int, week_start: date) -> list[RangeRecord]:
        """
        Fetches the availability records for one nurse and one week.
        Entries that don't fit the record shape are skipped with a warning.
        """
        params = {
            "start_date": week_start.isoformat(),
            "end_date": (week_start + timedelta(days=6)).isoformat(),
        }
        log.info(f"Fetching availability for nurse {nurse_id}, week of {week_start}.")
        data = await self._get(self._availability_url(nurse_id), params=params)

        records = []
        for item in data:
            try:
                records.append(RangeRecord.model_validate(item))
            except ValidationError as e:
                log.warning(f"Skipping malformed availability record for nurse {nurse_id}: {item} ({e.error_count()} errors)")
        return records

    async def _get(self, url: str, params: Optional[dict]) -> list[Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
                response.raise_for_status() # Raise an exception for HTTP errors (4xx or 5xx)
                body = response.json()
        except httpx.RequestError as e:
            log.error(f"HTTP request failed for {url}: {e}", exc_info=True)
            raise AvailabilityFetchError("Workforce API is currently unavailable.") from e
        except httpx.HTTPStatusError as e:
            log.error(f"Workforce API returned an error for {url}: {e.response.status_code} - {e.response.text}", exc_info=True)
            raise AvailabilityFetchError(f"Workforce API error ({e.response.status_code}).") from e
        except ValueError as e:
            log.error(f"Workforce API returned a non-JSON body for {url}: {e}", exc_info=True)
            raise AvailabilityFetchError("Workforce API returned an unreadable response.") from e

        if not isinstance(body, dict) or not body.get("success", False):
            message = body.get("message", "Unknown error") if isinstance(body, dict) else "Unexpected response"
            log.warning(f"Workforce API reported failure for {url}: {message}")
            raise AvailabilityFetchError(message)

        data = body.get("data")
        if not isinstance(data, list):
            log.warning(f"Workforce API returned no list for {url}: {body}")
            raise AvailabilityFetchError("Workforce API returned an unexpected payload.")
        return data

    # --- Writes ---

    async def replace_week(self, nurse_id: int, week_start: date, records: list[RangeRecord]) -> None:
        """
        Submits the full set of records for the week. The API treats it as a
        replacement, not a patch.
        """
        url = self._availability_url(nurse_id)
        payload = [record.model_dump(mode="json", exclude_none=True) for record in records]
        log.info(f"Saving {len(payload)} availability records for nurse {nurse_id}, week of {week_start}.")
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.put(url, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.RequestError as e:
            log.error(f"HTTP request failed while saving availability for nurse {nurse_id}: {e}", exc_info=True)
            raise AvailabilitySaveError("Workforce API is currently unavailable.") from e
        except httpx.HTTPStatusError as e:
            log.error(f"Workforce API rejected availability for nurse {nurse_id}: {e.response.status_code} - {e.response.text}", exc_info=True)
            raise AvailabilitySaveError(f"Workforce API error ({e.response.status_code}).") from e
        except ValueError as e:
            log.error(f"Workforce API returned a non-JSON body while saving for nurse {nurse_id}: {e}", exc_info=True)
            raise AvailabilitySaveError("Workforce API returned an unreadable response.") from e

        if not isinstance(body, dict) or not body.get("success", False):
            message = body.get("message", "Unknown error") if isinstance(body, dict) else "Unexpected response"
            log.warning(f"Workforce API refused availability for nurse {nurse_id}: {message}")
            raise AvailabilitySaveError(message)

        log.info(f"Availability saved for nurse {nurse_id}, week of {week_start}.")
