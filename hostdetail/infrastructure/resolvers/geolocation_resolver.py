"""Geolocation resolver for ip-api.com compatible endpoints.

Issues one HTTP call per lookup and maps the JSON answer to a GeoRecord.

Error mapping:
    - Deadline exceeded (hard, measured from call start) -> ResolverTimeoutError
    - Connection error, non-2xx status, non-object body -> ResolverTransportError
    - Body with status "fail" -> ResolverApplicationFailure

Architecture:
    - Infrastructure layer (adapter for an external API)
    - Uses httpx for async HTTP
    - Returns Result types (no exceptions for backend errors)
"""

import asyncio
from typing import Any

import httpx
import structlog

from hostdetail.core.constants import GEO_TIMEOUT_DEFAULT, RESPONSE_BODY_MAX_LENGTH
from hostdetail.core.enums import ErrorCode
from hostdetail.core.result import Failure, Result, Success
from hostdetail.domain.errors import (
    ResolverApplicationFailure,
    ResolverError,
    ResolverTimeoutError,
    ResolverTransportError,
)
from hostdetail.domain.value_objects import GeoRecord

RESOLVER_NAME = "geolocation"

RESPONSE_FIELDS = "status,message,country,countryCode,regionName,city,timezone,isp,lat,lon"


class IpApiGeolocationResolver:
    """Geolocation resolver backed by an ip-api.com style JSON endpoint.

    Implements GeolocationResolverProtocol (structural typing).

    Attributes:
        _base_url: API base URL (without trailing slash).
        _timeout: Hard deadline for one lookup in seconds.
        _transport: Optional httpx transport (tests use httpx.MockTransport).
        _logger: Structured logger.

    Example:
        >>> resolver = IpApiGeolocationResolver(base_url="http://ip-api.com")
        >>> match await resolver.resolve("8.8.8.8"):
        ...     case Success(value=geo):
        ...         print(geo.city)
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = GEO_TIMEOUT_DEFAULT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the geolocation resolver.

        Args:
            base_url: API base URL (e.g., "http://ip-api.com").
            timeout: Hard deadline for one lookup in seconds.
            transport: Optional httpx transport override.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._logger = structlog.get_logger("geolocation_api")

    async def resolve(self, ip: str) -> Result[GeoRecord, ResolverError]:
        """Resolve an IP address to a geolocation record.

        Args:
            ip: IPv4 or IPv6 literal.

        Returns:
            Success(GeoRecord) or Failure(ResolverError).
        """
        response_result = await self._execute_request(ip)
        if isinstance(response_result, Failure):
            return response_result

        payload_result = self._parse_payload(response_result.value, ip)
        if isinstance(payload_result, Failure):
            return payload_result
        data = payload_result.value

        if data.get("status") == "fail":
            backend_message = data.get("message")
            return Failure(
                error=ResolverApplicationFailure(
                    code=ErrorCode.RESOLVER_APPLICATION_FAILURE,
                    message=f"Geolocation API reported failure for {ip}",
                    resolver_name=RESOLVER_NAME,
                    backend_message=backend_message,
                    details={"ip": ip, "backend_message": backend_message},
                )
            )

        return Success(value=self._to_geo_record(data))

    async def _execute_request(self, ip: str) -> Result[httpx.Response, ResolverError]:
        """Execute the lookup request under the hard deadline.

        Args:
            ip: IP address to look up.

        Returns:
            Success(httpx.Response) or Failure on timeout/connection error.
        """
        url = f"{self._base_url}/json/{ip}"

        try:
            async with asyncio.timeout(self._timeout):
                async with httpx.AsyncClient(
                    timeout=self._timeout, transport=self._transport
                ) as client:
                    response = await client.get(
                        url, params={"fields": RESPONSE_FIELDS}
                    )
            return Success(value=response)

        except (TimeoutError, httpx.TimeoutException) as e:
            self._logger.warning(
                "geolocation_api_timeout",
                ip=ip,
                timeout_seconds=self._timeout,
                error=str(e),
            )
            return Failure(
                error=ResolverTimeoutError(
                    code=ErrorCode.RESOLVER_TIMEOUT,
                    message=f"Geolocation lookup exceeded {self._timeout}s",
                    resolver_name=RESOLVER_NAME,
                    timeout_seconds=self._timeout,
                    details={"ip": ip},
                )
            )

        except httpx.RequestError as e:
            self._logger.warning(
                "geolocation_api_connection_error",
                ip=ip,
                error=str(e),
            )
            return Failure(
                error=ResolverTransportError(
                    code=ErrorCode.RESOLVER_TRANSPORT_ERROR,
                    message=f"Failed to connect to geolocation API: {e}",
                    resolver_name=RESOLVER_NAME,
                    details={"ip": ip, "type": type(e).__name__},
                )
            )

    def _parse_payload(
        self, response: httpx.Response, ip: str
    ) -> Result[dict[str, Any], ResolverError]:
        """Check the HTTP status and decode the JSON object body.

        Args:
            response: HTTP response.
            ip: IP address that was looked up (for error context).

        Returns:
            Success(dict) or Failure(ResolverTransportError).
        """
        if not response.is_success:
            self._logger.warning(
                "geolocation_api_http_error",
                ip=ip,
                status_code=response.status_code,
            )
            return Failure(
                error=ResolverTransportError(
                    code=ErrorCode.RESOLVER_TRANSPORT_ERROR,
                    message=f"Geolocation API returned HTTP {response.status_code}",
                    resolver_name=RESOLVER_NAME,
                    status_code=response.status_code,
                    details={
                        "ip": ip,
                        "response_body": response.text[:RESPONSE_BODY_MAX_LENGTH],
                    },
                )
            )

        try:
            data = response.json()
        except ValueError as e:
            self._logger.warning(
                "geolocation_api_invalid_json",
                ip=ip,
                error=str(e),
            )
            return Failure(
                error=ResolverTransportError(
                    code=ErrorCode.RESOLVER_TRANSPORT_ERROR,
                    message="Invalid JSON response from geolocation API",
                    resolver_name=RESOLVER_NAME,
                    status_code=response.status_code,
                    details={
                        "ip": ip,
                        "response_body": response.text[:RESPONSE_BODY_MAX_LENGTH],
                    },
                )
            )

        if not isinstance(data, dict):
            return Failure(
                error=ResolverTransportError(
                    code=ErrorCode.RESOLVER_TRANSPORT_ERROR,
                    message="Expected object response from geolocation API",
                    resolver_name=RESOLVER_NAME,
                    status_code=response.status_code,
                    details={"ip": ip, "data_type": type(data).__name__},
                )
            )

        return Success(value=data)

    @staticmethod
    def _to_geo_record(data: dict[str, Any]) -> GeoRecord:
        return GeoRecord(
            country=data.get("country"),
            country_code=data.get("countryCode"),
            region=data.get("regionName"),
            city=data.get("city"),
            timezone=data.get("timezone"),
            isp=data.get("isp"),
            lat=data.get("lat"),
            lon=data.get("lon"),
        )
