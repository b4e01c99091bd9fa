"""Tests for the code scanning service."""

import json

import httpx
import pytest
import respx

from ghrest import GitHubClient, collect
from ghrest.services.code_scanning import (
    AlertListOptions,
    AnalysesListOptions,
    CodeScanningAlertState,
    SarifAnalysis,
)

from .conftest import HOST

SCANNING = "/repos/o/r/code-scanning"


class TestAlerts:
    @pytest.mark.asyncio
    @respx.mock
    async def test_list_for_repo(self, client: GitHubClient) -> None:
        route = respx.get(host=HOST, path=f"{SCANNING}/alerts").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "number": 4,
                        "state": "open",
                        "rule": {"id": "js/trivial-conditional", "severity": "warning"},
                        "tool": {"name": "CodeQL"},
                        "most_recent_instance": {
                            "ref": "refs/heads/main",
                            "location": {"path": "src/index.js", "start_line": 3},
                            "message": {"text": "This condition always evaluates to true."},
                        },
                    }
                ],
            )
        )

        page = await client.code_scanning.list_alerts_for_repo(
            "o", "r", AlertListOptions(state="open", ref="main")
        )

        alert = page[0]
        assert alert.rule is not None and alert.rule.id == "js/trivial-conditional"
        assert alert.most_recent_instance is not None
        assert alert.most_recent_instance.location is not None
        assert alert.most_recent_instance.location.start_line == 3
        params = route.calls.last.request.url.params
        assert params["state"] == "open"
        assert params["ref"] == "main"

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_for_org_follows_cursor(self, client: GitHubClient) -> None:
        base = "https://api.github.test/orgs/acme/code-scanning/alerts"
        route = respx.get(host=HOST, path="/orgs/acme/code-scanning/alerts").mock(
            side_effect=[
                httpx.Response(
                    200,
                    json=[{"number": 1}],
                    headers={"Link": f'<{base}?after=abc>; rel="next"'},
                ),
                httpx.Response(200, json=[{"number": 2}]),
            ]
        )

        alerts = await collect(
            lambda opts: client.code_scanning.list_alerts_for_org("acme", opts),
            AlertListOptions(),
        )

        assert [a.number for a in alerts] == [1, 2]
        assert route.calls.last.request.url.params["after"] == "abc"

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_and_dismiss(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path=f"{SCANNING}/alerts/4").mock(
            return_value=httpx.Response(200, json={"number": 4, "state": "open"})
        )
        update = respx.patch(host=HOST, path=f"{SCANNING}/alerts/4").mock(
            return_value=httpx.Response(
                200, json={"number": 4, "state": "dismissed", "dismissed_reason": "used in tests"}
            )
        )

        assert (await client.code_scanning.get_alert("o", "r", 4)).state == "open"
        alert = await client.code_scanning.update_alert(
            "o", "r", 4, CodeScanningAlertState(state="dismissed", dismissed_reason="used in tests")
        )

        assert alert.dismissed_reason == "used in tests"
        assert json.loads(update.calls.last.request.content) == {
            "state": "dismissed",
            "dismissed_reason": "used in tests",
        }

    @pytest.mark.asyncio
    async def test_dismiss_requires_reason(self, client: GitHubClient) -> None:
        with pytest.raises(ValueError, match="dismissed_reason"):
            await client.code_scanning.update_alert(
                "o", "r", 4, CodeScanningAlertState(state="dismissed")
            )

    @pytest.mark.asyncio
    @respx.mock
    async def test_instances(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path=f"{SCANNING}/alerts/4/instances").mock(
            return_value=httpx.Response(200, json=[{"ref": "refs/heads/main", "state": "open"}])
        )
        page = await client.code_scanning.list_alert_instances("o", "r", 4)
        assert page[0].ref == "refs/heads/main"


class TestAnalyses:
    @pytest.mark.asyncio
    @respx.mock
    async def test_list_and_get(self, client: GitHubClient) -> None:
        route = respx.get(host=HOST, path=f"{SCANNING}/analyses").mock(
            return_value=httpx.Response(200, json=[{"id": 201, "tool": {"name": "CodeQL"}}])
        )
        respx.get(host=HOST, path=f"{SCANNING}/analyses/201").mock(
            return_value=httpx.Response(200, json={"id": 201, "results_count": 3})
        )

        page = await client.code_scanning.list_analyses(
            "o", "r", AnalysesListOptions(tool_name="CodeQL")
        )
        analysis = await client.code_scanning.get_analysis("o", "r", 201)

        assert page[0].tool is not None and page[0].tool.name == "CodeQL"
        assert route.calls.last.request.url.params["tool_name"] == "CodeQL"
        assert analysis.results_count == 3


class TestSarif:
    @pytest.mark.asyncio
    @respx.mock
    async def test_upload_accepted_returns_id(self, client: GitHubClient) -> None:
        route = respx.post(host=HOST, path=f"{SCANNING}/sarifs").mock(
            return_value=httpx.Response(
                202, json={"id": "47177e22", "url": "https://api.github.test/sarifs/47177e22"}
            )
        )

        sarif_id = await client.code_scanning.upload_sarif(
            "o", "r", SarifAnalysis(commit_sha="abc", ref="refs/heads/main", sarif="H4sI")
        )

        assert sarif_id.id == "47177e22"
        assert json.loads(route.calls.last.request.content) == {
            "commit_sha": "abc",
            "ref": "refs/heads/main",
            "sarif": "H4sI",
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_upload_accepted_without_body(self, client: GitHubClient) -> None:
        respx.post(host=HOST, path=f"{SCANNING}/sarifs").mock(return_value=httpx.Response(202))

        sarif_id = await client.code_scanning.upload_sarif(
            "o", "r", SarifAnalysis(commit_sha="abc", ref="main", sarif="H4sI")
        )

        assert sarif_id.id is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_sarif(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path=f"{SCANNING}/sarifs/47177e22").mock(
            return_value=httpx.Response(200, json={"processing_status": "complete"})
        )
        upload = await client.code_scanning.get_sarif("o", "r", "47177e22")
        assert upload.processing_status == "complete"
