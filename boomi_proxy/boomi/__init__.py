"""
Boomi AtomSphere API

Per-request client and models for the ProcessDeployment and Process
resources.
"""

from .models import (
    Credentials, CredentialsBody,
    Deployment, DeploymentTypeView, ToggleResult,
    ListenerAction, SchedulerAction,
    deployment_query, match_all_filter,
)
from .client import BoomiClient, decode_body

__all__ = [
    "Credentials",
    "CredentialsBody",
    "Deployment",
    "DeploymentTypeView",
    "ToggleResult",
    "ListenerAction",
    "SchedulerAction",
    "deployment_query",
    "match_all_filter",
    "BoomiClient",
    "decode_body",
]
