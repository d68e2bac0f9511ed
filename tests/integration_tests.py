"""
Integration tests for keycloakadmin against a live Keycloak server.

These tests are disabled by default to prevent them from running during
normal test execution. They create and remove a throwaway realm.

To run these tests:
    pytest tests/integration_tests.py --run-integration [--keycloak-url URL]

Environment: a local Keycloak (e.g. the jboss/keycloak container)
- URL: http://127.0.0.1:8080/auth
- Username: admin
- Password: admin
"""

import asyncio
import uuid

import pytest

from keycloakadmin import create_client
from keycloakadmin.exceptions import (
    KeycloakAuthenticationError,
    KeycloakConflictError,
    KeycloakNotFoundError,
    KeycloakValidationError,
)

# Pytest markers
pytestmark = pytest.mark.integration


@pytest.fixture
def settings(request):
    return {
        "baseUrl": request.config.getoption("--keycloak-url"),
        "username": "admin",
        "password": "admin",
        "grant_type": "password",
        "client_id": "admin-cli",
    }


@pytest.fixture
def realm_name():
    return f"kc-admin-it-{uuid.uuid4().hex[:8]}"


@pytest.mark.asyncio
async def test_invalid_credentials(settings):
    with pytest.raises(KeycloakAuthenticationError) as exc_info:
        await create_client({**settings, "password": "not-the-password"})
    assert exc_info.value.error == "invalid_grant"
    assert exc_info.value.error_description == "Invalid user credentials"


@pytest.mark.asyncio
async def test_unknown_client_id(settings):
    with pytest.raises(KeycloakAuthenticationError) as exc_info:
        await create_client({**settings, "client_id": "no-such-client"})
    assert exc_info.value.error in ("unauthorized_client", "invalid_client")


@pytest.mark.asyncio
async def test_master_realm_is_listed(settings):
    kc = await create_client(settings)
    async with kc:
        realms = await kc.realms.find()
        master = await kc.realms.find("master")
    assert "master" in [r["realm"] for r in realms]
    assert master["realm"] == "master"


@pytest.mark.asyncio
async def test_unknown_realm(settings):
    kc = await create_client(settings)
    async with kc:
        with pytest.raises(KeycloakNotFoundError) as exc_info:
            await kc.realms.find("not-a-realm")
    assert exc_info.value.body == {"error": "Realm not found."}


@pytest.mark.asyncio
async def test_realm_lifecycle(settings, realm_name):
    kc = await create_client(settings)
    async with kc:
        created = await kc.realms.create({"realm": realm_name})
        try:
            assert created["realm"] == realm_name
            with pytest.raises(KeycloakConflictError):
                await kc.realms.create({"realm": realm_name})
            await kc.realms.update(realm_name, {"displayName": "Integration"})
            assert (await kc.realms.find(realm_name))["displayName"] == "Integration"
        finally:
            await kc.realms.remove(realm_name)
        with pytest.raises(KeycloakNotFoundError):
            await kc.realms.find(realm_name)


@pytest.mark.asyncio
async def test_users_clients_and_role_mappings(settings, realm_name):
    kc = await create_client(settings)
    async with kc:
        await kc.realms.create({"realm": realm_name})
        try:
            user = await kc.users.create(realm_name, {"username": "scott", "enabled": True})
            assert user["username"] == "scott"
            await kc.users.reset_password(
                realm_name, user["id"], {"temporary": False, "value": "tiger"}
            )

            client = await kc.clients.create(realm_name, {"clientId": "it-client"})
            assert client["clientId"] == "it-client"
            secret = await kc.clients.get_client_secret(realm_name, client["id"])
            assert secret["type"] == "secret"

            client_role = await kc.clients.roles.create(
                realm_name, client["id"], {"name": "reader"}
            )
            await kc.clients.maps.map(realm_name, user["id"], client["id"], [client_role])

            realm_role = await kc.realms.roles.create(realm_name, {"name": "staff"})
            await kc.realms.maps.map(realm_name, user["id"], [realm_role])

            mappings = await kc.users.role_mappings.find(realm_name, user["id"])
            assert "staff" in [r["name"] for r in mappings["realmMappings"]]
            assert "reader" in [
                r["name"] for r in mappings["clientMappings"]["it-client"]["mappings"]
            ]

            await kc.realms.maps.unmap(realm_name, user["id"], [realm_role])
            await kc.clients.maps.unmap(realm_name, user["id"], client["id"], [client_role])

            with pytest.raises(KeycloakValidationError, match="roles are missing"):
                await kc.realms.maps.map(realm_name, user["id"], None)

            assert await kc.users.groups.find(realm_name, user["id"]) == []
            assert await kc.groups.find(realm_name) == []
            await kc.events.find(realm_name)

            await kc.users.remove(realm_name, user["id"])
            await kc.clients.remove(realm_name, client["id"])
        finally:
            await kc.realms.remove(realm_name)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call",
    [
        lambda kc: kc.users.find("notarealrealm"),
        lambda kc: kc.clients.find("notarealrealm"),
        lambda kc: kc.groups.find("notarealrealm"),
        lambda kc: kc.realms.roles.find("notarealrealm"),
    ],
)
async def test_find_in_unknown_realm(settings, call):
    kc = await create_client(settings)
    async with kc:
        with pytest.raises(KeycloakNotFoundError) as exc_info:
            await call(kc)
    assert exc_info.value.error_message == "Realm not found."


@pytest.mark.asyncio
async def test_client_update_round_trip(settings, realm_name):
    kc = await create_client(settings)
    async with kc:
        await kc.realms.create({"realm": realm_name})
        try:
            created = await kc.clients.create(realm_name, {"clientId": "test created client"})
            assert created["clientId"] == "test created client"
            await kc.clients.update(realm_name, {**created, "description": "updated"})
            found = await kc.clients.find(realm_name, {"id": created["id"]})
            assert found["description"] == "updated"
            assert found["clientId"] == created["clientId"]
            assert found["protocol"] == created["protocol"]
        finally:
            await kc.realms.remove(realm_name)


@pytest.mark.asyncio
async def test_concurrent_finds_on_one_handle(settings):
    kc = await create_client(settings)
    async with kc:
        realms, master_clients = await asyncio.gather(
            kc.realms.find(), kc.clients.find("master", {"clientId": "admin-cli"})
        )
    assert "master" in [r["realm"] for r in realms]
    assert master_clients[0]["clientId"] == "admin-cli"
