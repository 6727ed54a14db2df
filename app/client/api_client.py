"""HTTP client for the Contest Hub API.

Holds the bearer token for the logged-in user and exposes one method per
REST operation. Any non-2xx response raises ``ApiError``; a 401 also drops the
held token and user, which is how an expired session logs the client out.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, detail: str, code: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        super().__init__(f"{status_code}: {detail}")


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class ContestHubClient:
    def __init__(self, base_url: str = "http://localhost:8000", http_client: Optional[httpx.Client] = None,
                 token: Optional[str] = None, timeout: float = 10.0):
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def logout(self) -> None:
        self.token = None
        self.user = None

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self._http.request(method, f"/api{path}", headers=headers, **kwargs)

        if response.status_code == 401:
            self.logout()
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise ApiError(response.status_code, body.get("detail", response.reason_phrase), body.get("error"))
        return response.json()

    # Auth

    def login(self, email: str, password: str, role: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password, "role": role})
        self.token = data["token"]
        self.user = {**data["user"], "role": data["role"]}
        logger.debug("Logged in as %s %s", data["role"], self.user.get("id"))
        return data

    def register(self, **student_fields) -> Dict[str, Any]:
        data = self._request("POST", "/auth/register", json=student_fields)
        self.token = data["token"]
        self.user = {**data["user"], "role": data["role"]}
        return data

    def get_profile(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    # Contests

    def list_contests(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/contests/")

    def get_contest(self, contest_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/contests/{contest_id}")

    def create_contest(self, image: Optional[Tuple[str, bytes, str]] = None, **fields) -> Dict[str, Any]:
        form = {key: _form_value(value) for key, value in fields.items() if value is not None}
        files = {"image": image} if image else None
        return self._request("POST", "/contests/", data=form, files=files)

    def update_contest(self, contest_id: int, **fields) -> Dict[str, Any]:
        payload = {k: (v.isoformat() if isinstance(v, datetime) else v) for k, v in fields.items()}
        return self._request("PUT", f"/contests/{contest_id}", json=payload)

    def delete_contest(self, contest_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/contests/{contest_id}")

    # Registrations

    def register_for_contest(self, contest_id: int) -> Dict[str, Any]:
        return self._request("POST", "/registrations/", json={"contest_id": contest_id})

    def my_registrations(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/registrations/my")

    def contest_registrations(self, contest_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/registrations/contest/{contest_id}")

    def cancel_registration(self, registration_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/registrations/{registration_id}")

    # Teams

    def create_team(self, contest_id: int, team_name: str) -> Dict[str, Any]:
        return self._request("POST", "/teams/", json={"contest_id": contest_id, "team_name": team_name})

    def join_team(self, team_id: int) -> Dict[str, Any]:
        return self._request("POST", f"/teams/{team_id}/join")

    def leave_team(self, team_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/teams/{team_id}/leave")

    def teams_for_contest(self, contest_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/teams/contest/{contest_id}")

    def get_team(self, team_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/teams/{team_id}")

    def my_teams(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/teams/my/all")

    # Mentors

    def list_mentors(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/mentors/")

    def create_mentor(self, **mentor_fields) -> Dict[str, Any]:
        return self._request("POST", "/mentors/", json=mentor_fields)

    def mentor_contests(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/mentors/my/contests")

    def mentor_teams(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/mentors/my/teams")

    def assign_mentor_to_contest(self, contest_id: int, mentor_id: int) -> Dict[str, Any]:
        return self._request("POST", "/mentors/assign/contest", json={"contest_id": contest_id, "mentor_id": mentor_id})

    def assign_mentor_to_team(self, team_id: int, mentor_id: int) -> Dict[str, Any]:
        return self._request("POST", "/mentors/assign/team", json={"team_id": team_id, "mentor_id": mentor_id})

    # Chat

    def my_chat_groups(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/chat/my-groups")

    def get_messages(self, contest_id: int, limit: Optional[int] = None, before: Optional[int] = None) -> Dict[str, Any]:
        params = {k: v for k, v in {"limit": limit, "before": before}.items() if v is not None}
        return self._request("GET", f"/chat/{contest_id}", params=params)

    def send_message(self, contest_id: int, text: str) -> Dict[str, Any]:
        return self._request("POST", f"/chat/{contest_id}", json={"message_text": text})

    def delete_message(self, message_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/chat/message/{message_id}")
