"""
Boomi Models

Pydantic models for credentials, deployment records and the views
derived from them.
"""

import base64
from enum import Enum
from typing import Optional, Dict, List, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import MissingCredentials, InvalidAction


class Credentials(BaseModel):
    """Per-request Boomi credentials. Never stored."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    account_id: str = Field(..., alias="accountId")
    username: str
    password: str

    @classmethod
    def require(
        cls,
        account_id: Optional[str],
        username: Optional[str],
        password: Optional[str],
    ) -> "Credentials":
        """Build credentials, treating absent or empty values as missing."""
        if not account_id or not username or not password:
            raise MissingCredentials()
        return cls(account_id=account_id, username=username, password=password)

    def auth_headers(self) -> Dict[str, str]:
        """Basic-Auth headers for the Boomi API."""
        token = base64.b64encode(f"{self.username}:{self.password}".encode()).decode()
        return {
            "Authorization": f"Basic {token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def account_url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/{self.account_id}"


class CredentialsBody(BaseModel):
    """JSON body of the toggle routes; every field may be missing."""
    model_config = ConfigDict(populate_by_name=True)

    account_id: Optional[str] = Field(None, alias="accountId")
    username: Optional[str] = None
    password: Optional[str] = None

    @field_validator("account_id", "username", "password", mode="before")
    @classmethod
    def _scalar_as_text(cls, value: Any) -> Any:
        # Numbers and booleans are accepted as text; falsy ones count as missing
        if isinstance(value, (bool, int, float)):
            return str(value).lower() if value else None
        return value

    def require(self) -> Credentials:
        return Credentials.require(self.account_id, self.username, self.password)


class _ToggleAction(str, Enum):

    @classmethod
    def parse(cls, value: str):
        try:
            return cls(value)
        except ValueError:
            raise InvalidAction([a.value for a in cls]) from None

    @property
    def past_tense(self) -> str:
        return f"{self.value}d"


class ListenerAction(_ToggleAction):
    """Listener toggle actions."""
    ENABLE = "enable"
    DISABLE = "disable"


class SchedulerAction(_ToggleAction):
    """Scheduler toggle actions."""
    PAUSE = "pause"
    RESUME = "resume"


class Deployment(BaseModel):
    """
    A ProcessDeployment record as returned by Boomi.

    Only ``id`` and the two status fields are declared; everything else is
    carried through untouched. Whether a status field was sent at all is
    read from ``model_fields_set``, so a null or empty status still counts.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[Any] = None
    listenerStatus: Optional[Any] = None
    scheduleStatus: Optional[Any] = None

    @property
    def is_listener(self) -> bool:
        return "listenerStatus" in self.model_fields_set

    @property
    def is_scheduler(self) -> bool:
        return "scheduleStatus" in self.model_fields_set

    @property
    def status(self) -> Any:
        if self.is_listener:
            return self.listenerStatus
        if self.is_scheduler:
            return self.scheduleStatus
        return "N/A"


class DeploymentTypeView(BaseModel):
    """Listener/scheduler classification of a deployment."""
    isListener: bool
    isScheduler: bool
    status: Any
    deploymentDetails: Dict[str, Any]

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "DeploymentTypeView":
        deployment = Deployment.model_validate(record)
        return cls(
            isListener=deployment.is_listener,
            isScheduler=deployment.is_scheduler,
            status=deployment.status,
            deploymentDetails=record,
        )


class ToggleResult(BaseModel):
    """Response of a listener or scheduler toggle."""
    success: bool = True
    message: str
    deploymentId: str
    response: Any = None


def match_all_filter() -> Dict[str, Any]:
    """Query filter that matches every record."""
    return {
        "QueryFilter": {
            "expression": {
                "operator": "and",
                "nestedExpression": [],
            }
        }
    }


def deployment_query(process_id: Optional[str] = None) -> Dict[str, Any]:
    """Body of a ProcessDeployment query, optionally narrowed to one process."""
    if process_id:
        return {"processIds": [process_id]}
    return match_all_filter()


def summary_ids(summaries: List[Dict[str, Any]]) -> List[Any]:
    """Deployment ids from a query result, in query order."""
    return [Deployment.model_validate(s).id for s in summaries]
