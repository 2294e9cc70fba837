"""HTTP API client base class. Entities persist through a subclass of Backend."""

import logging
from typing import Any, ClassVar, Dict, Optional, Type

import httpx

from auditkit.config.settings import AuditSettings, get_settings

logger = logging.getLogger(__name__)

_backends: Dict[str, Type["Backend"]] = {}


def find_backend(name: str) -> Optional[Type["Backend"]]:
    """Backend subclass registered under class name, or None."""
    return _backends.get(name)


class BackendError(Exception):
    """Base for all backend-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BaseUrlNotDefinedError(BackendError):
    """Raised when a backend is built without a base_url."""


def parse_json(response: httpx.Response) -> Any:
    """Decoded JSON body; an empty body decodes to {}."""
    if not response.content:
        return {}
    return response.json()


class Backend:
    """
    Synchronous API client bound to one entity instance.

    Subclasses set ``base_url`` (and optionally ``headers``) and may override
    ``update``/``destroy``; the defaults PUT the entity payload to, and
    DELETE, ``<base_url>/<pk>``. Non-2xx responses raise httpx.HTTPStatusError.
    """

    base_url: ClassVar[Optional[str]] = None
    headers: ClassVar[Dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        _backends[cls.__name__] = cls

    @classmethod
    def resolve_base_url(cls) -> str:
        if cls.base_url is None:
            raise BaseUrlNotDefinedError(
                f"Add the following to {cls.__name__} to make it work:\n\n"
                '    base_url = "https://example.com/some/path"\n\n'
                "Making sure to change the URL to something useful."
            )
        return cls.base_url

    def __init__(
        self,
        settings: Optional[AuditSettings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.model: Any = None
        event_hooks = (
            {"request": [self._log_request], "response": [self._log_response]}
            if self._settings.http_logging
            else {}
        )
        self.client = httpx.Client(
            base_url=self.resolve_base_url(),
            headers={**self.headers, "User-Agent": self._settings.user_agent},
            verify=self._settings.ssl_verify,
            timeout=self._settings.http_timeout_seconds,
            transport=transport,
            event_hooks=event_hooks,
        )

    def register_model(self, model: Any) -> None:
        self.model = model

    def _log_request(self, request: httpx.Request) -> None:
        logger.info("backend_request", extra={"method": request.method, "url": str(request.url)})

    def _log_response(self, response: httpx.Response) -> None:
        logger.info(
            "backend_response",
            extra={"status_code": response.status_code, "url": str(response.request.url)},
        )

    def request(self, method: str, path: str = "", **kwargs: Any) -> Any:
        response = self.client.request(method, path, **kwargs)
        response.raise_for_status()
        return parse_json(response)

    def get(self, path: str = "", **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def put(self, path: str = "", **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)

    def post(self, path: str = "", **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def patch(self, path: str = "", **kwargs: Any) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str = "", **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)

    def member_path(self) -> str:
        return f"/{self.model.pk}"

    def update(self) -> Any:
        return self.put(self.member_path(), json=self.model.to_payload())

    def destroy(self) -> None:
        self.delete(self.member_path())

    def close(self) -> None:
        self.client.close()
