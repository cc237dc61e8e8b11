"""
Microsoft Graph lookups for the signed-in user: direct reports, manager and
batched profile resolution.
"""
from typing import Any, Dict, Iterable, List, Optional, Protocol
from teams_timesheet.config import Settings, get_settings
from teams_timesheet.utils.dates import split_list
import httpx
import logging

logger = logging.getLogger(__name__)


class GraphRequestError(Exception):
    """A request inside a Graph $batch call failed."""

    def __init__(self, user_id: str, status: int, body: Any = None):
        super().__init__(f"Graph lookup for user {user_id} failed with status {status}")
        self.user_id = user_id
        self.status = status
        self.body = body


class UsersDirectory(Protocol):
    def get_my_reportees(self, search: Optional[str] = None) -> List[Dict[str, Any]]: ...

    def get_manager(self) -> Dict[str, Any]: ...

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]: ...


class GraphUsersService:
    def __init__(
        self,
        access_token: str,
        settings: Optional[Settings] = None,
        client: Optional[httpx.Client] = None
    ):
        if not access_token:
            raise ValueError("An access token is required to call Microsoft Graph")

        settings = settings or get_settings()
        self.batch_size = settings.graph_batch_size
        self.client = client or httpx.Client(
            base_url=settings.graph_base_url,
            timeout=settings.graph_timeout_seconds,
        )
        self.headers = {"Authorization": f"Bearer {access_token}"}

    def close(self):
        self.client.close()

    def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        response = self.client.get(url, params=params, headers=self.headers)
        response.raise_for_status()
        return response.json()

    def get_my_reportees(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """Direct reports of the signed-in user, following @odata.nextLink to the last page."""
        if search:
            escaped = search.replace("'", "''")
            params = {"$filter": f"startsWith(displayName,'{escaped}') or startsWith(mail,'{escaped}')"}
        else:
            params = {"$select": "id,displayName,userPrincipalName"}

        page = self._get("/me/directReports", params)
        reportees = list(page.get("value", []))

        # nextLink is absolute and already carries the query
        next_link = page.get("@odata.nextLink")
        while next_link:
            page = self._get(next_link)
            reportees.extend(page.get("value", []))
            next_link = page.get("@odata.nextLink")

        logger.info(f"Fetched {len(reportees)} reportees")
        return reportees

    def get_manager(self) -> Dict[str, Any]:
        return self._get("/me/manager")

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """Profiles keyed by user id, resolved with one $batch request per chunk of ids."""
        if user_ids is None:
            raise ValueError("User ids are required")

        profiles: Dict[str, Dict[str, Any]] = {}
        for batch in split_list(list(user_ids), self.batch_size):
            payload = {
                "requests": [
                    {"id": str(index), "method": "GET", "url": f"/users/{user_id}"}
                    for index, user_id in enumerate(batch)
                ]
            }
            response = self.client.post("/$batch", json=payload, headers=self.headers)
            response.raise_for_status()

            # Graph may answer batch steps in any order
            steps = {step.get("id"): step for step in response.json().get("responses", [])}
            for index, user_id in enumerate(batch):
                step = steps.get(str(index))
                if step is None:
                    raise GraphRequestError(user_id, 0)
                status = step.get("status", 0)
                if status >= 400:
                    logger.error(f"Graph lookup for user {user_id} returned {status}")
                    raise GraphRequestError(user_id, status, step.get("body"))
                profile = step.get("body") or {}
                profiles[profile.get("id", user_id)] = profile

            logger.debug(f"Resolved batch of {len(batch)} user ids")

        return profiles
