"""Tests for Boomi models and query builders."""

import base64

import pytest

from boomi_proxy.boomi import (
    Credentials,
    CredentialsBody,
    Deployment,
    DeploymentTypeView,
    ListenerAction,
    SchedulerAction,
    deployment_query,
    match_all_filter,
)
from boomi_proxy.errors import InvalidAction, MissingCredentials


def test_credentials_require():
    creds = Credentials.require("acct", "user", "pw")

    assert creds.account_id == "acct"
    assert creds.account_url("https://api.boomi.com/api/rest/v1/") == "https://api.boomi.com/api/rest/v1/acct"


@pytest.mark.parametrize("values", [
    (None, "user", "pw"),
    ("acct", None, "pw"),
    ("acct", "user", None),
    ("acct", "", "pw"),
])
def test_credentials_missing(values):
    with pytest.raises(MissingCredentials) as exc_info:
        Credentials.require(*values)

    assert exc_info.value.status_code == 400


def test_credentials_body_uses_camel_case():
    body = CredentialsBody.model_validate({"accountId": "acct", "username": "u", "password": "p"})

    assert body.require().account_id == "acct"


def test_auth_headers():
    headers = Credentials.require("acct", "user@example.com", "p:w").auth_headers()

    token = headers["Authorization"].removeprefix("Basic ")
    assert base64.b64decode(token).decode() == "user@example.com:p:w"
    assert headers["Accept"] == "application/json"
    assert headers["Content-Type"] == "application/json"


def test_actions():
    assert ListenerAction.parse("enable") is ListenerAction.ENABLE
    assert SchedulerAction.parse("resume").past_tense == "resumed"
    assert ListenerAction.DISABLE.past_tense == "disabled"

    with pytest.raises(InvalidAction) as exc_info:
        SchedulerAction.parse("enable")

    assert exc_info.value.detail == "Action must be pause or resume"
    assert exc_info.value.status_code == 400


def test_deployment_presence_not_truthiness():
    deployment = Deployment.model_validate({"id": "d", "listenerStatus": None, "extra": 1})

    assert deployment.is_listener is True
    assert deployment.is_scheduler is False
    assert deployment.status is None


def test_deployment_listener_wins_over_schedule():
    view = DeploymentTypeView.from_record({"listenerStatus": "PAUSED", "scheduleStatus": "RUNNING"})

    assert view.status == "PAUSED"
    assert view.isListener and view.isScheduler


def test_deployment_type_view_keeps_record():
    record = {"id": "d", "processId": "p", "environmentId": "e", "version": 4}

    view = DeploymentTypeView.from_record(record)

    assert view.deploymentDetails == record
    assert view.status == "N/A"


def test_query_filters():
    assert deployment_query("proc-1") == {"processIds": ["proc-1"]}
    assert deployment_query(None) == match_all_filter()
    assert match_all_filter() == {
        "QueryFilter": {"expression": {"operator": "and", "nestedExpression": []}}
    }


@pytest.mark.parametrize("value, expected", [
    (12345, "12345"),
    (1.5, "1.5"),
    (True, "true"),
    (0, None),
    (False, None),
])
def test_credentials_body_scalars_as_text(value, expected):
    body = CredentialsBody.model_validate({"accountId": "acct", "username": "u", "password": value})

    assert body.password == expected


def test_deployment_id_any_type():
    assert Deployment.model_validate({"id": 42}).id == 42
