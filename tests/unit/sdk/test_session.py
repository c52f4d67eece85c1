"""Tests unitarios para el handshake con el SDK de login."""

import asyncio

import pytest

from fb_catalog.schemas.graph_schemas import LoginStatus
from fb_catalog.sdk.session import SdkSession
from fb_catalog.utils.error_handler import SdkException, ValidationException

CONNECTED_PAYLOAD = {
    "status": "connected",
    "authResponse": {"accessToken": "EAAB-token", "userID": "10001", "expiresIn": 5400},
}


class FakeSdk:
    """SDK falso: responde a cada callback con el payload configurado."""

    def __init__(self, status_payload=None, login_payload=None, init_failures=0):
        self.status_payload = status_payload or {"status": "unknown"}
        self.login_payload = login_payload or CONNECTED_PAYLOAD
        self.init_options = None
        self.login_options = None
        self.logout_calls = 0
        self.init_failures = init_failures

    def init(self, options):
        if self.init_failures:
            self.init_failures -= 1
            raise RuntimeError("FB.init failed")
        self.init_options = options

    def get_login_status(self, callback):
        callback(self.status_payload)

    def login(self, callback, options):
        self.login_options = options
        callback(self.login_payload)
        # El SDK puede llamar el callback más de una vez; solo cuenta la primera
        callback({"status": "unknown"})

    def logout(self, callback):
        self.logout_calls += 1
        callback()


class TestInitializeSdk:
    """Tests para initialize_sdk / on_sdk_loaded."""

    @pytest.mark.asyncio
    async def test_waits_until_host_signals_sdk_loaded(self):
        """No debe resolver hasta que el host avise que el SDK cargó."""
        sdk = FakeSdk()
        session = SdkSession(sdk)

        task = asyncio.create_task(session.initialize_sdk("app_123"))
        await asyncio.sleep(0)
        assert not task.done()
        assert sdk.init_options is None

        session.on_sdk_loaded()
        await asyncio.wait_for(task, timeout=1)

        assert session.is_ready
        assert sdk.init_options == {"appId": "app_123", "cookie": True, "xfbml": True, "version": "v19.0"}

    @pytest.mark.asyncio
    async def test_sdk_loaded_before_initialize_still_resolves(self):
        """Si el SDK cargó antes, initialize_sdk debe resolver de inmediato."""
        sdk = FakeSdk()
        session = SdkSession(sdk)

        session.on_sdk_loaded()
        await asyncio.wait_for(session.initialize_sdk("app_123"), timeout=1)

        assert sdk.init_options["appId"] == "app_123"

    @pytest.mark.asyncio
    async def test_missing_app_id_fails(self, monkeypatch):
        monkeypatch.delenv("FACEBOOK_APP_ID", raising=False)
        session = SdkSession(FakeSdk())

        with pytest.raises(ValidationException):
            await session.initialize_sdk()

    @pytest.mark.asyncio
    async def test_app_id_defaults_to_settings(self, monkeypatch):
        monkeypatch.setenv("FACEBOOK_APP_ID", "app_from_env")
        sdk = FakeSdk()
        session = SdkSession(sdk)

        session.on_sdk_loaded()
        await asyncio.wait_for(session.initialize_sdk(), timeout=1)

        assert sdk.init_options["appId"] == "app_from_env"

    @pytest.mark.asyncio
    async def test_failed_init_on_load_can_be_retried(self):
        """Si FB.init falla, el host puede volver a avisar y la espera resuelve."""
        sdk = FakeSdk(init_failures=1)
        session = SdkSession(sdk)

        task = asyncio.create_task(session.initialize_sdk("app_123"))
        await asyncio.sleep(0)

        with pytest.raises(RuntimeError):
            session.on_sdk_loaded()
        await asyncio.sleep(0)
        assert not task.done()
        assert not session.is_ready

        session.on_sdk_loaded()
        await asyncio.wait_for(task, timeout=1)

        assert session.is_ready
        assert sdk.init_options["appId"] == "app_123"

    @pytest.mark.asyncio
    async def test_failed_init_after_load_can_be_retried(self):
        """Con el SDK ya cargado, un FB.init fallido se propaga y initialize_sdk puede reintentarse."""
        sdk = FakeSdk(init_failures=1)
        session = SdkSession(sdk)
        session.on_sdk_loaded()

        with pytest.raises(RuntimeError):
            await session.initialize_sdk("app_123")
        assert not session.is_ready

        await asyncio.wait_for(session.initialize_sdk("app_123"), timeout=1)

        assert session.is_ready
        assert sdk.init_options["appId"] == "app_123"


class TestSessionOperations:
    """Tests para get_login_status, login y logout."""

    @pytest.mark.asyncio
    async def test_operations_before_initialize_fail(self):
        """Usar la sesión sin initialize_sdk debe fallar explícitamente."""
        session = SdkSession(FakeSdk())

        with pytest.raises(SdkException):
            await session.get_login_status()

    @pytest.mark.asyncio
    async def test_get_login_status_returns_sdk_payload(self):
        sdk = FakeSdk(status_payload=CONNECTED_PAYLOAD)
        session = SdkSession(sdk)
        session.on_sdk_loaded()
        await session.initialize_sdk("app_123")

        status = await asyncio.wait_for(session.get_login_status(), timeout=1)

        assert status.status is LoginStatus.CONNECTED
        assert status.is_connected
        assert status.access_token == "EAAB-token"

    @pytest.mark.asyncio
    async def test_login_requests_catalog_scopes_and_keeps_first_callback(self):
        """Debe pedir los scopes fijos y quedarse con la primera respuesta."""
        sdk = FakeSdk()
        session = SdkSession(sdk)
        session.on_sdk_loaded()
        await session.initialize_sdk("app_123")

        status = await asyncio.wait_for(session.login(), timeout=1)

        assert sdk.login_options == {"scope": "catalog_management,business_management,pages_show_list"}
        assert status.status is LoginStatus.CONNECTED

    @pytest.mark.asyncio
    async def test_cancelled_login_resolves_with_status(self):
        """Una cancelación del usuario no es una excepción: se revisa el status."""
        sdk = FakeSdk(login_payload={"status": "not_authorized", "authResponse": None})
        session = SdkSession(sdk)
        session.on_sdk_loaded()
        await session.initialize_sdk("app_123")

        status = await asyncio.wait_for(session.login(), timeout=1)

        assert status.status is LoginStatus.NOT_AUTHORIZED
        assert not status.is_connected
        assert status.access_token is None

    @pytest.mark.asyncio
    async def test_logout_resolves_without_payload(self):
        sdk = FakeSdk()
        session = SdkSession(sdk)
        session.on_sdk_loaded()
        await session.initialize_sdk("app_123")

        result = await asyncio.wait_for(session.logout(), timeout=1)

        assert result is None
        assert sdk.logout_calls == 1
