"""Request builder framework shared by every operation.

A builder is a mutable staging object with fluent setters. ``build()`` is
the only way to obtain a :class:`RequestSpec`: it checks required fields
in declaration order, then URL formats, then the field constraints declared
on the spec model. A spec therefore never exists without having passed
validation, and a failing build never touches the network.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Self, TypeVar

import httpx
import pydantic
from pydantic import BaseModel, ConfigDict

from ..errors import ErrorCode, ValidationError

if TYPE_CHECKING:
    from ..client import Mpesa

E = TypeVar("E", bound=StrEnum)


class RequestSpec(BaseModel):
    """Immutable, validated description of one API call.

    Subclasses declare their endpoint through class variables and their
    wire names through ``serialization_alias``.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    path: ClassVar[str]
    method: ClassVar[str] = "POST"
    privileged: ClassVar[bool] = False
    response_model: ClassVar[type[BaseModel]]

    def to_payload(self) -> dict[str, Any] | list[Any]:
        """Serialize to the JSON body sent on the wire."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


SpecT = TypeVar("SpecT", bound=RequestSpec)


def check_url(value: str, field: str) -> str:
    """Require an absolute http(s) URL with a host.

    Raises:
        ValidationError: Naming ``field`` if the URL is unusable.
    """
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError) as e:
        raise ValidationError(
            f"{field} is not a valid URL: {e}",
            field=field,
            code=ErrorCode.INVALID_URL,
        ) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ValidationError(
            f"{field} must be an absolute http or https URL",
            field=field,
            code=ErrorCode.INVALID_URL,
        )
    return value


def coerce_enum(enum_type: type[E], value: E | str, field: str) -> E:
    """Coerce a raw code into a closed enumeration.

    Raises:
        ValidationError: If ``value`` is not a member's value.
    """
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValidationError(
            f"Unknown {enum_type.__name__} {value!r}; expected one of: {allowed}",
            field=field,
        ) from None


class RequestBuilder(Generic[SpecT]):
    """Mutable staging object producing a frozen request spec.

    Subclasses set ``spec_type`` and list their ``required`` fields in
    declaration order. Defaults are seeded in ``__init__`` through
    :meth:`_set`.
    """

    spec_type: ClassVar[type[RequestSpec]]
    required: ClassVar[tuple[str, ...]] = ()

    def __init__(self, *, client: Mpesa | None = None) -> None:
        self._client = client
        self._values: dict[str, Any] = {}
        self._checked_urls: set[str] = set()

    def _set(self, name: str, value: Any) -> Self:
        self._values[name] = value
        return self

    def _set_url(self, name: str, value: str, *, validate: bool) -> Self:
        if validate:
            self._checked_urls.add(name)
        else:
            self._checked_urls.discard(name)
        return self._set(name, value)

    def _spec_values(self) -> dict[str, Any]:
        """Keyword arguments passed to the spec model."""
        return dict(self._values)

    def build(self) -> SpecT:
        """Validate the staged values and freeze them into a spec.

        Raises:
            ValidationError: Naming the first missing or invalid field.
        """
        for name in self.required:
            if self._values.get(name) is None:
                raise ValidationError(
                    f"Required field {name} is missing",
                    field=name,
                    code=ErrorCode.MISSING_FIELD,
                )

        for name in self.spec_type.model_fields:
            if name in self._checked_urls:
                check_url(self._values[name], name)

        try:
            spec = self.spec_type(**self._spec_values())
        except pydantic.ValidationError as e:
            error = e.errors()[0]
            loc = error.get("loc") or ()
            field = str(loc[0]) if loc else None
            raise ValidationError(
                f"{field}: {error['msg']}" if field else error["msg"],
                field=field,
            ) from e
        return spec  # type: ignore[return-value]

    async def send(self) -> Any:
        """Build the spec and dispatch it through the owning client.

        Raises:
            ValidationError: If the builder is invalid or has no client.
        """
        spec = self.build()
        if self._client is None:
            raise ValidationError(
                "Builder is not bound to a client; pass the spec to Mpesa.send()",
                field="client",
                code=ErrorCode.INVALID_CONFIG,
            )
        return await self._client.send(spec)

    def __repr__(self) -> str:
        staged = ", ".join(sorted(self._values))
        return f"{self.__class__.__name__}({staged})"
