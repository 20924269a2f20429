"""HTTP client for the shifts persistence API.

Thin wrapper around the REST endpoints that store week plans and send
summaries. Failures surface as ``TransportError``; retrying is left to the
caller.
"""

import logging
from datetime import date
from typing import Optional, Union

import requests

from shiftplanner.domain.models import WeeklySummary
from shiftplanner.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3000"


def _iso(value: Union[date, str]) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def summary_email_days(summary: WeeklySummary) -> list[dict]:
    """Build the per-day list expected by the summary email endpoint.

    Each working day becomes ``{fecha, horaInicio, horaFin, tieneAlmuerzo}``
    spanning its first to last block; days with nothing scheduled are left
    out.
    """
    days = []
    for day in summary.days:
        if day.blocks:
            start, end = day.blocks[0].start, day.blocks[-1].end
        elif day.lunch:
            start, end = day.lunch.start, day.lunch.end
        else:
            continue
        days.append({
            "fecha": day.date.isoformat(),
            "horaInicio": start,
            "horaFin": end,
            "tieneAlmuerzo": day.lunch is not None,
        })
    return days


class ShiftsApiClient:
    """Client for the shifts endpoints.

    Example:
        >>> client = ShiftsApiClient("http://localhost:3000", token="...")
        >>> payload = client.get_shifts("emp-1", "2024-01-08", "2024-01-14")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_shifts(
        self,
        employee_id: str,
        start_date: Union[date, str],
        end_date: Union[date, str],
    ) -> dict:
        """Load an employee's plan for a week.

        A 404 means no plan was saved yet and yields empty sections.
        """
        params = {
            "employeeId": employee_id,
            "startDate": _iso(start_date),
            "endDate": _iso(end_date),
        }
        response = self._request("GET", "/shifts", params=params, allow_404=True)
        if response is None:
            return {"shifts": {}, "lunchHours": {}, "overtimeHours": {}, "dayOff": None}

        data = self._json(response) or {}
        return {
            "shifts": data.get("shifts") or {},
            "lunchHours": data.get("lunchHours") or {},
            "overtimeHours": data.get("overtimeHours") or {},
            "plannedDayOff": data.get("plannedDayOff"),
            "dayOff": data.get("dayOff"),
            "diaDescanso": data.get("diaDescanso"),
        }

    def save_shifts(self, payload: dict) -> dict:
        """Persist a week plan built by ``to_payload``."""
        response = self._request("POST", "/shifts/save", json=payload)
        return self._json(response)

    def get_weekly_overview(
        self,
        center_id: str,
        week_start: Union[date, str],
        week_end: Union[date, str],
    ) -> dict:
        """Fetch the weekly overview of every employee at a center."""
        body = {
            "lavanderiaId": center_id,
            "weekStart": _iso(week_start),
            "weekEnd": _iso(week_end),
        }
        response = self._request("POST", "/shifts/weekly-overview", json=body)
        return self._json(response)

    def send_summary_email(
        self,
        employee: dict,
        center: Optional[dict],
        days: list[dict],
    ) -> dict:
        """Ask the server to email a weekly summary to the employee.

        Args:
            employee: Employee snapshot (``Employee.to_snapshot()``).
            center: ``{"id", "nombre"}`` of the laundry center, if known.
            days: Output of ``summary_email_days``.
        """
        body = {"empleado": employee, "lavanderia": center, "dias": days}
        response = self._request("POST", "/shifts/send-summary-email", json=body)
        return self._json(response)

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        allow_404: bool = False,
        **kwargs,
    ) -> Optional[requests.Response]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {path} failed: {exc}")

        if allow_404 and response.status_code == 404:
            return None
        if not response.ok:
            message = self._error_message(response)
            logger.error("%s %s returned %s: %s", method, url, response.status_code, message)
            raise TransportError(message, status_code=response.status_code)
        return response

    def _json(self, response: requests.Response):
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            raise TransportError(
                f"Invalid JSON in response from {response.url}",
                status_code=response.status_code,
            )

    def _error_message(self, response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return response.reason or f"Request failed with status {response.status_code}"
