"""Geolocation record value object."""

from dataclasses import asdict, dataclass
from typing import Any

_COORDINATE_FIELDS = frozenset({"lat", "lon"})


@dataclass(frozen=True, slots=True, kw_only=True)
class GeoRecord:
    """Geolocation of an IP address as reported by the geolocation backend.

    Pass-through data: fields are whatever the backend returned, the record
    is present or absent as a whole.

    Attributes:
        country: Country name ("United States").
        country_code: ISO country code ("US").
        region: Region or state name ("California").
        city: City name.
        timezone: IANA timezone ("America/Los_Angeles").
        isp: Internet service provider name.
        lat: Latitude.
        lon: Longitude.
    """

    country: str | None = None
    country_code: str | None = None
    region: str | None = None
    city: str | None = None
    timezone: str | None = None
    isp: str | None = None
    lat: float | None = None
    lon: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict (cache storage format)."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeoRecord":
        """Rebuild a record from its cache storage format.

        Args:
            data: Dict produced by to_dict().

        Returns:
            GeoRecord instance.

        Raises:
            TypeError: If data has unknown keys or is not a mapping.
            ValueError: If no field is set or a field has the wrong type.
        """
        record = cls(**data)
        values = record.to_dict()
        if all(value is None for value in values.values()):
            raise ValueError("geolocation record has no fields set")
        for name, value in values.items():
            if value is None:
                continue
            if name in _COORDINATE_FIELDS:
                if isinstance(value, bool) or not isinstance(value, int | float):
                    raise ValueError(f"{name} must be a number, got {value!r}")
            elif not isinstance(value, str):
                raise ValueError(f"{name} must be a string, got {value!r}")
        return record
