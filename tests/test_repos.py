"""Tests for the repositories service."""

import json

import httpx
import pytest
import respx

from ghrest import GitHubClient
from ghrest.services.repos import (
    ListContributorsOptions,
    RepositoryCreate,
    RepositoryCreateFork,
    RepositoryListByOrgOptions,
    RepositoryListOptions,
    RepositoryUpdate,
)

from .conftest import HOST


class TestListing:
    @pytest.mark.asyncio
    @respx.mock
    async def test_list_by_authenticated_user(self, client: GitHubClient) -> None:
        route = respx.get(host=HOST, path="/user/repos").mock(
            return_value=httpx.Response(200, json=[{"id": 1, "full_name": "me/a"}])
        )

        page = await client.repositories.list_by_authenticated_user(
            RepositoryListOptions(visibility="private", affiliation="owner,collaborator")
        )

        assert page[0].full_name == "me/a"
        params = route.calls.last.request.url.params
        assert params["visibility"] == "private"
        assert params["affiliation"] == "owner,collaborator"

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_by_user_and_org(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/users/octocat/repos").mock(
            return_value=httpx.Response(200, json=[{"id": 1}])
        )
        org = respx.get(host=HOST, path="/orgs/github/repos").mock(
            return_value=httpx.Response(200, json=[{"id": 2}, {"id": 3}])
        )

        assert len(await client.repositories.list_by_user("octocat")) == 1
        page = await client.repositories.list_by_org(
            "github", RepositoryListByOrgOptions(type="forks")
        )

        assert len(page) == 2
        assert org.calls.last.request.url.params["type"] == "forks"


class TestSingleRepository:
    @pytest.mark.asyncio
    @respx.mock
    async def test_create_for_user_and_org(self, client: GitHubClient) -> None:
        user = respx.post(host=HOST, path="/user/repos").mock(
            return_value=httpx.Response(201, json={"name": "n"})
        )
        org = respx.post(host=HOST, path="/orgs/o/repos").mock(
            return_value=httpx.Response(201, json={"name": "n"})
        )

        await client.repositories.create(RepositoryCreate(name="n", private=True))
        await client.repositories.create(RepositoryCreate(name="n"), org="o")

        assert json.loads(user.calls.last.request.content) == {"name": "n", "private": True}
        assert json.loads(org.calls.last.request.content) == {"name": "n"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_decodes_nested(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/repos/o/r").mock(
            return_value=httpx.Response(
                200,
                json={
                    "id": 1,
                    "owner": {"login": "o", "type": "Organization"},
                    "parent": {"full_name": "up/r"},
                    "license": {"spdx_id": "MIT"},
                    "permissions": {"admin": True, "push": True, "pull": True},
                    "custom_property": "kept",
                },
            )
        )

        repo = await client.repositories.get("o", "r")

        assert repo.owner is not None and repo.owner.user_type == "Organization"
        assert repo.parent is not None and repo.parent.full_name == "up/r"
        assert repo.license is not None and repo.license.spdx_id == "MIT"
        assert repo.permissions is not None and repo.permissions.admin is True
        assert repo.model_extra == {"custom_property": "kept"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_by_id_edit_delete(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/repositories/7").mock(
            return_value=httpx.Response(200, json={"id": 7})
        )
        edit = respx.patch(host=HOST, path="/repos/o/r").mock(
            return_value=httpx.Response(200, json={"id": 7, "archived": True})
        )
        respx.delete(host=HOST, path="/repos/o/r").mock(return_value=httpx.Response(204))

        assert (await client.repositories.get_by_id(7)).id == 7
        repo = await client.repositories.edit("o", "r", RepositoryUpdate(archived=True))
        response = await client.repositories.delete("o", "r")

        assert repo.archived is True
        assert json.loads(edit.calls.last.request.content) == {"archived": True}
        assert response.status_code == 204


class TestDetails:
    @pytest.mark.asyncio
    @respx.mock
    async def test_contributors_languages_teams_tags(self, client: GitHubClient) -> None:
        contributors = respx.get(host=HOST, path="/repos/o/r/contributors").mock(
            return_value=httpx.Response(200, json=[{"login": "a", "contributions": 10}])
        )
        respx.get(host=HOST, path="/repos/o/r/languages").mock(
            return_value=httpx.Response(200, json={"Go": 1000, "Python": 20})
        )
        respx.get(host=HOST, path="/repos/o/r/teams").mock(
            return_value=httpx.Response(200, json=[{"slug": "core"}])
        )
        respx.get(host=HOST, path="/repos/o/r/tags").mock(
            return_value=httpx.Response(200, json=[{"name": "v1", "commit": {"sha": "abc"}}])
        )

        people = await client.repositories.list_contributors(
            "o", "r", ListContributorsOptions(anon="true")
        )
        languages = await client.repositories.list_languages("o", "r")
        teams = await client.repositories.list_teams("o", "r")
        tags = await client.repositories.list_tags("o", "r")

        assert people[0].contributions == 10
        assert contributors.calls.last.request.url.params["anon"] == "true"
        assert languages == {"Go": 1000, "Python": 20}
        assert teams[0].slug == "core"
        assert tags[0].commit is not None and tags[0].commit.sha == "abc"

    @pytest.mark.asyncio
    @respx.mock
    async def test_topics(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/repos/o/r/topics").mock(
            return_value=httpx.Response(200, json={"names": ["go", "api"]})
        )
        replace = respx.put(host=HOST, path="/repos/o/r/topics").mock(
            return_value=httpx.Response(200, json={"names": []})
        )

        assert await client.repositories.list_topics("o", "r") == ["go", "api"]
        assert await client.repositories.replace_topics("o", "r", []) == []
        assert json.loads(replace.calls.last.request.content) == {"names": []}


class TestForks:
    @pytest.mark.asyncio
    @respx.mock
    async def test_list_forks(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/repos/o/r/forks").mock(
            return_value=httpx.Response(200, json=[{"id": 1, "fork": True}])
        )
        page = await client.repositories.list_forks("o", "r")
        assert page[0].fork is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_fork_scheduled(self, client: GitHubClient) -> None:
        route = respx.post(host=HOST, path="/repos/o/r/forks").mock(
            return_value=httpx.Response(202, json={"id": 99, "full_name": "me/r"})
        )

        fork = await client.repositories.create_fork(
            "o", "r", RepositoryCreateFork(organization="me", default_branch_only=True)
        )

        assert fork.full_name == "me/r"
        assert json.loads(route.calls.last.request.content) == {
            "organization": "me",
            "default_branch_only": True,
        }
