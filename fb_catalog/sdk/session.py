"""
Login SDK session handshake.

The vendor login SDK is callback based: the host environment signals once
that the SDK asset has loaded, and each of ``get_login_status``, ``login``
and ``logout`` reports its result through a completion callback. This module
turns that into awaitable operations. The "SDK loaded and initialized"
condition is a one-time future shared by every session operation.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Protocol

from fb_catalog.core.config import get_settings
from fb_catalog.schemas.graph_schemas import LoginStatusResponse
from fb_catalog.utils.error_handler import SdkException, ValidationException, log_error

logger = logging.getLogger(__name__)

SdkCallback = Callable[..., None]


class LoginSdk(Protocol):
    """Surface of the vendor SDK object used by the session."""

    def init(self, options: Dict[str, Any]) -> None: ...

    def get_login_status(self, callback: SdkCallback) -> None: ...

    def login(self, callback: SdkCallback, options: Dict[str, Any]) -> None: ...

    def logout(self, callback: SdkCallback) -> None: ...


class SdkSession:
    """
    Awaitable wrapper around the vendor login SDK.

    The host calls ``on_sdk_loaded()`` once the SDK asset is available; it may
    do so before or after ``initialize_sdk()``. There is no timeout: if the
    host never signals the load, ``initialize_sdk()`` and every session
    operation wait forever.
    """

    def __init__(self, sdk: LoginSdk):
        self.sdk = sdk
        self.settings = get_settings()
        self._app_id: Optional[str] = None
        self._sdk_loaded = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._ready: Optional[asyncio.Future] = None

    @property
    def is_ready(self) -> bool:
        return self._ready is not None and self._ready.done()

    async def initialize_sdk(self, app_id: Optional[str] = None) -> None:
        """
        Initialize the SDK with cookie sessions, XFBML parsing and the pinned
        API version, resolving once the host has signalled the SDK load.

        Args:
            app_id: Facebook app id; defaults to FACEBOOK_APP_ID

        Raises:
            ValidationException: If no app id is available
        """
        app_id = app_id or self.settings.FACEBOOK_APP_ID
        if not app_id:
            raise ValidationException("A Facebook app id is required to initialize the SDK", field="app_id")

        if self._ready is None:
            self._loop = asyncio.get_running_loop()
            self._ready = self._loop.create_future()
            self._app_id = app_id
            if self._sdk_loaded:
                try:
                    self._complete_init()
                except Exception:
                    self._ready = None
                    raise
        elif app_id != self._app_id:
            logger.warning(f"SDK already initialized for app {self._app_id}, ignoring app {app_id}")

        await asyncio.shield(self._ready)

    def on_sdk_loaded(self) -> None:
        """
        Host hook: the SDK asset has finished loading.

        If the SDK ``init`` call raises, the error propagates to the host and
        the load is not recorded, so pending ``initialize_sdk()`` callers keep
        waiting until the host signals again.
        """
        if self._sdk_loaded:
            return
        if self._ready is not None:
            self._complete_init()
        self._sdk_loaded = True

    def _complete_init(self) -> None:
        try:
            self.sdk.init(
                {
                    "appId": self._app_id,
                    "cookie": True,
                    "xfbml": True,
                    "version": self.settings.GRAPH_API_VERSION,
                }
            )
        except Exception as e:
            log_error(e, "initialize_sdk", {"app_id": self._app_id})
            raise
        logger.info(f"Facebook SDK initialized for app {self._app_id} ({self.settings.GRAPH_API_VERSION})")
        self._loop.call_soon_threadsafe(self._resolve, self._ready, None)

    @staticmethod
    def _resolve(future: asyncio.Future, value: Any) -> None:
        if not future.done():
            future.set_result(value)

    async def _wait_ready(self) -> None:
        if self._ready is None:
            raise SdkException("Facebook SDK not initialized. Call initialize_sdk() first.")
        await asyncio.shield(self._ready)

    async def _call(self, invoke: Callable[[SdkCallback], None]) -> Any:
        """Run one SDK call and wait for the first invocation of its callback."""
        await self._wait_ready()
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def callback(response: Any = None) -> None:
            loop.call_soon_threadsafe(self._resolve, future, response)

        invoke(callback)
        return await future

    async def get_login_status(self) -> LoginStatusResponse:
        """Current session status as reported by the SDK."""
        response = await self._call(self.sdk.get_login_status)
        return LoginStatusResponse.model_validate(response or {})

    async def login(self) -> LoginStatusResponse:
        """
        Prompt for login with the catalog management scopes.

        Resolves with the status payload even when the user cancels; inspect
        ``status`` to tell the outcomes apart.
        """
        options = {"scope": self.settings.login_scope}
        response = await self._call(lambda callback: self.sdk.login(callback, options))
        status = LoginStatusResponse.model_validate(response or {})
        logger.info(f"Facebook login finished with status {status.status.value}")
        return status

    async def logout(self) -> None:
        await self._call(self.sdk.logout)
        logger.info("Facebook session logged out")
