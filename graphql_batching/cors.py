"""CORS header policy for the gateway endpoint."""

from __future__ import annotations

from collections.abc import Iterable

from .models import GatewayRequest
from .models import GatewayResponse


class CorsPolicy:
    """Decides which CORS headers a response carries.

    Responses to requests whose ``Origin`` is not allowed are left untouched.
    """

    def __init__(
        self,
        enabled: bool = True,
        allowed_origins: Iterable[str] = ("*",),
        allowed_headers: Iterable[str] = ("Authorization", "Content-Type", "Content-Language"),
        allowed_methods: Iterable[str] = ("GET", "POST", "OPTIONS"),
        allow_credentials: bool = False,
        max_age: int = 86400,
    ):
        self.enabled = enabled
        self.allowed_origins = [origin.rstrip("/") for origin in allowed_origins]
        self.allowed_headers = list(allowed_headers)
        self.allowed_methods = [method.upper() for method in allowed_methods]
        self.allow_credentials = allow_credentials
        self.max_age = max_age

    @classmethod
    def from_settings(cls, settings) -> "CorsPolicy":
        return cls(
            enabled=settings.cors_enabled,
            allowed_origins=settings.cors_allowed_origins,
            allowed_headers=settings.cors_allowed_headers,
            allowed_methods=settings.cors_allowed_methods,
            allow_credentials=settings.cors_allow_credentials,
            max_age=settings.cors_max_age,
        )

    def allowed_origin(self, origin: str | None) -> str | None:
        """Return the value for Access-Control-Allow-Origin, or None if not allowed."""
        if not self.enabled or not origin:
            return None
        origin = origin.rstrip("/")
        if "*" in self.allowed_origins:
            # A wildcard cannot be combined with credentials
            return origin if self.allow_credentials else "*"
        if origin in self.allowed_origins:
            return origin
        return None

    def cors_headers(self, request: GatewayRequest) -> dict[str, str]:
        allow_origin = self.allowed_origin(request.header("Origin"))
        if allow_origin is None:
            return {}

        headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Headers": ", ".join(self.allowed_headers),
            "Access-Control-Allow-Methods": ", ".join(self.allowed_methods),
            "Access-Control-Max-Age": str(self.max_age),
        }
        if allow_origin != "*":
            headers["Vary"] = "Origin"
        if self.allow_credentials:
            headers["Access-Control-Allow-Credentials"] = "true"
        return headers

    def add_cors_headers(self, request: GatewayRequest, response: GatewayResponse) -> GatewayResponse:
        response.headers.update(self.cors_headers(request))
        return response

    def handle_options(self, request: GatewayRequest) -> GatewayResponse:
        """Answer a preflight request without touching the batch pipeline."""
        return self.add_cors_headers(request, GatewayResponse(status_code=200))
