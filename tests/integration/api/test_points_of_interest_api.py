"""Integration tests for the point of interest endpoints."""

from collections.abc import AsyncGenerator

import pytest
import pytest_check
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from loguru import logger
from pytest_mock import MockerFixture
from sqlalchemy.exc import OperationalError

from cityinfo.api.constants import INTERNAL_ERROR_MESSAGE
from cityinfo.infrastructure.database.city_info_repository import CityInfoRepository
from cityinfo.services.notifications import get_mail_service

BASE = "/api/cities/{}/pointsofinterest"
JSON_PATCH = {"Content-Type": "application/json-patch+json"}


@pytest.mark.integration
class TestAuthorization:
    async def test_requires_authentication(self, client_with_db: AsyncClient) -> None:
        response = await client_with_db.get(BASE.format(1))

        assert response.status_code == 401

    async def test_requires_berlin_residence(
        self, client_with_db: AsyncClient, antwerp_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.get(BASE.format(1), headers=antwerp_headers)

        assert response.status_code == 403
        assert response.json()["error_code"] == "FORBIDDEN"

    async def test_forbidden_before_not_found(
        self, client_with_db: AsyncClient, antwerp_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.delete(
            f"{BASE.format(999)}/1", headers=antwerp_headers
        )

        assert response.status_code == 403

    @pytest.mark.parametrize(
        "path",
        [BASE.format(2**31), f"{BASE.format(1)}/99999999999999999999"],
    )
    async def test_out_of_range_id_is_rejected(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str], path: str
    ) -> None:
        response = await client_with_db.get(path, headers=berlin_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


@pytest.mark.integration
class TestReadPointsOfInterest:
    async def test_list(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.get(BASE.format(1), headers=berlin_headers)

        assert response.status_code == 200
        assert [point["name"] for point in response.json()] == [
            "Central Park",
            "Empire State Building",
        ]

    async def test_list_for_missing_city(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.get(BASE.format(999), headers=berlin_headers)

        assert response.status_code == 404
        assert response.content == b""

    async def test_get(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.get(
            f"{BASE.format(3)}/5", headers=berlin_headers
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Eiffel Tower"

    async def test_get_from_another_city_is_404(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        """Point of interest 5 exists, but belongs to Paris."""
        response = await client_with_db.get(
            f"{BASE.format(1)}/5", headers=berlin_headers
        )

        assert response.status_code == 404
        assert response.content == b""

    async def test_list_as_xml(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.get(
            BASE.format(2), headers={**berlin_headers, "Accept": "application/xml"}
        )

        assert response.status_code == 200
        assert b"<pointsOfInterest><pointOfInterest>" in response.content

    async def test_persistence_failure_is_hidden(
        self,
        client_with_db: AsyncClient,
        berlin_headers: dict[str, str],
        mocker: MockerFixture,
    ) -> None:
        mocker.patch.object(
            CityInfoRepository,
            "list_points_of_interest",
            side_effect=OperationalError("SELECT", {}, Exception("db is gone")),
        )

        response = await client_with_db.get(BASE.format(1), headers=berlin_headers)

        assert response.status_code == 500
        assert response.json()["message"] == INTERNAL_ERROR_MESSAGE


@pytest.mark.integration
class TestCreatePointOfInterest:
    async def test_create_then_get(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.post(
            BASE.format(3),
            json={"name": "Arc de Triomphe", "description": "A monument."},
            headers=berlin_headers,
        )

        assert response.status_code == 201
        created = response.json()
        with pytest_check.check:
            assert created["id"] == 7
        with pytest_check.check:
            assert created["name"] == "Arc de Triomphe"
        location = response.headers["Location"]
        with pytest_check.check:
            assert location == f"http://test{BASE.format(3)}/{created['id']}"

        fetched = await client_with_db.get(location, headers=berlin_headers)
        assert fetched.status_code == 200
        assert fetched.json() == created

        listed = await client_with_db.get(BASE.format(3), headers=berlin_headers)
        assert len(listed.json()) == 3

    async def test_create_for_missing_city(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.post(
            BASE.format(999), json={"name": "Nowhere"}, headers=berlin_headers
        )

        assert response.status_code == 404

    @pytest.mark.parametrize(
        ("body", "field", "message"),
        [
            ({"description": "No name"}, "name", "Field required"),
            ({"name": "   "}, "name", "You should provide a name value."),
            ({"name": "x" * 51}, "name", "at most 50 characters"),
            ({"name": "Ok", "description": "x" * 201}, "description", "at most 200"),
        ],
    )
    async def test_invalid_body(
        self,
        client_with_db: AsyncClient,
        berlin_headers: dict[str, str],
        body: dict[str, str],
        field: str,
        message: str,
    ) -> None:
        response = await client_with_db.post(
            BASE.format(1), json=body, headers=berlin_headers
        )

        assert response.status_code == 400
        errors = response.json()["details"]["validation_errors"]
        assert any(message in error for error in errors[field])

    async def test_save_failure_is_500(
        self,
        app: FastAPI,
        berlin_headers: dict[str, str],
        mocker: MockerFixture,
    ) -> None:
        mocker.patch.object(
            CityInfoRepository,
            "save_changes",
            side_effect=OperationalError("COMMIT", {}, Exception("disk full")),
        )
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                BASE.format(1), json={"name": "Bryant Park"}, headers=berlin_headers
            )

        assert response.status_code == 500
        assert response.json()["message"] == INTERNAL_ERROR_MESSAGE
        assert "disk full" not in response.text


@pytest.mark.integration
class TestUpdatePointOfInterest:
    async def test_put_replaces_every_field(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        url = f"{BASE.format(1)}/1"

        response = await client_with_db.put(
            url, json={"name": "Central Park (renamed)"}, headers=berlin_headers
        )

        assert response.status_code == 204
        assert response.content == b""
        fetched = (await client_with_db.get(url, headers=berlin_headers)).json()
        assert fetched == {
            "id": 1,
            "name": "Central Park (renamed)",
            "description": None,
        }

    async def test_put_missing_point_of_interest(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.put(
            f"{BASE.format(1)}/999", json={"name": "Ghost"}, headers=berlin_headers
        )

        assert response.status_code == 404

    async def test_put_invalid_body(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.put(
            f"{BASE.format(1)}/1", json={"name": ""}, headers=berlin_headers
        )

        assert response.status_code == 400

    async def test_patch_replaces_only_name(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        url = f"{BASE.format(1)}/2"

        response = await client_with_db.patch(
            url,
            json=[{"op": "replace", "path": "/name", "value": "Empire State"}],
            headers={**berlin_headers, **JSON_PATCH},
        )

        assert response.status_code == 204
        fetched = (await client_with_db.get(url, headers=berlin_headers)).json()
        assert fetched["name"] == "Empire State"
        assert fetched["description"] == (
            "A 102-story skyscraper located in Midtown Manhattan."
        )

    @pytest.mark.parametrize(
        ("operations", "error_key"),
        [
            (
                [{"op": "replace", "path": "/invalidproperty", "value": "x"}],
                "/invalidproperty",
            ),
            ([{"op": "add", "path": "/id", "value": 42}], "/id"),
            ([{"op": "move", "path": "/name"}], "/name"),
        ],
    )
    async def test_patch_invalid_document(
        self,
        client_with_db: AsyncClient,
        berlin_headers: dict[str, str],
        operations: list[dict[str, object]],
        error_key: str,
    ) -> None:
        url = f"{BASE.format(1)}/1"

        response = await client_with_db.patch(
            url, json=operations, headers={**berlin_headers, **JSON_PATCH}
        )

        assert response.status_code == 400
        assert error_key in response.json()["details"]["validation_errors"]
        fetched = (await client_with_db.get(url, headers=berlin_headers)).json()
        assert fetched["name"] == "Central Park"

    @pytest.mark.parametrize(
        "operations",
        [
            [{"op": "remove", "path": "/name"}],
            [{"op": "replace", "path": "/name", "value": ""}],
            [{"op": "replace", "path": "/description", "value": "x" * 201}],
        ],
    )
    async def test_patch_result_must_be_valid(
        self,
        client_with_db: AsyncClient,
        berlin_headers: dict[str, str],
        operations: list[dict[str, object]],
    ) -> None:
        url = f"{BASE.format(1)}/1"

        response = await client_with_db.patch(
            url, json=operations, headers={**berlin_headers, **JSON_PATCH}
        )

        assert response.status_code == 400
        fetched = (await client_with_db.get(url, headers=berlin_headers)).json()
        assert fetched["name"] == "Central Park"
        assert fetched["description"] == (
            "The most visited urban park in the United States."
        )

    async def test_patch_body_must_be_a_list(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.patch(
            f"{BASE.format(1)}/1",
            json={"op": "replace", "path": "/name", "value": "x"},
            headers={**berlin_headers, **JSON_PATCH},
        )

        assert response.status_code == 400

    async def test_patch_missing_point_of_interest(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.patch(
            f"{BASE.format(2)}/1",
            json=[{"op": "replace", "path": "/name", "value": "x"}],
            headers={**berlin_headers, **JSON_PATCH},
        )

        assert response.status_code == 404


class _FailingMailService:
    def send(self, subject: str, message: str) -> None:
        raise ConnectionError("SMTP server unreachable")


@pytest.fixture
async def failing_mail_app(app: FastAPI) -> AsyncGenerator[FastAPI]:
    app.dependency_overrides[get_mail_service] = _FailingMailService
    yield app
    app.dependency_overrides.pop(get_mail_service, None)


@pytest.mark.integration
class TestDeletePointOfInterest:
    async def test_delete_removes_only_that_point(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        records: list[str] = []
        sink_id = logger.add(lambda m: records.append(m.record["message"]))

        try:
            response = await client_with_db.delete(
                f"{BASE.format(1)}/1", headers=berlin_headers
            )
        finally:
            logger.remove(sink_id)

        assert response.status_code == 204
        assert response.content == b""
        missing = await client_with_db.get(
            f"{BASE.format(1)}/1", headers=berlin_headers
        )
        assert missing.status_code == 404
        remaining = await client_with_db.get(BASE.format(1), headers=berlin_headers)
        assert [point["id"] for point in remaining.json()] == [2]
        assert any(message.startswith("Mail from") for message in records)

    async def test_delete_twice(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        url = f"{BASE.format(3)}/6"

        first = await client_with_db.delete(url, headers=berlin_headers)
        second = await client_with_db.delete(url, headers=berlin_headers)

        assert (first.status_code, second.status_code) == (204, 404)

    async def test_mail_failure_does_not_block_delete(
        self,
        failing_mail_app: FastAPI,
        client_with_db: AsyncClient,
        berlin_headers: dict[str, str],
    ) -> None:
        _ = failing_mail_app
        url = f"{BASE.format(2)}/3"

        response = await client_with_db.delete(url, headers=berlin_headers)

        assert response.status_code == 204
        missing = await client_with_db.get(url, headers=berlin_headers)
        assert missing.status_code == 404
