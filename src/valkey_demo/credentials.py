"""Credential resolution.

Chooses between the two mutually exclusive configuration sources:

- local mode: discrete VALKEY_* environment variables
- platform mode: a VCAP_SERVICES service-binding payload

and normalizes either into a :class:`ConnectionDescriptor`.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict, RootModel, SecretStr, ValidationError

from valkey_demo.config import Settings
from valkey_demo.errors import (
    InvalidPort,
    MalformedBindingPayload,
    MissingHost,
    MissingPassword,
    MissingPort,
    MissingUsername,
    NoServiceInstances,
    ResolutionError,
)

logger = logging.getLogger(__name__)

_PORT_PATTERN = re.compile(r"\+?[0-9]+")


class ConnectionDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str
    port: int
    username: str
    password: SecretStr
    ca_certificate: str | None = None

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class ValkeyDetails(BaseModel):
    username: str
    password: SecretStr
    port: int


class BindingCredentials(BaseModel):
    host: str
    cacrt: str | None = None
    valkey: ValkeyDetails


class ServiceInstance(BaseModel):
    credentials: BindingCredentials

    def to_descriptor(self) -> ConnectionDescriptor:
        creds = self.credentials
        return ConnectionDescriptor(
            host=creds.host,
            port=creds.valkey.port,
            username=creds.valkey.username,
            password=creds.valkey.password,
            ca_certificate=creds.cacrt,
        )


class ServiceBindingPayload(RootModel[dict[str, list[ServiceInstance]]]):
    """Service name -> bound instances, as injected by the platform."""

    def first_instance(self) -> ServiceInstance | None:
        # Document order; multiple bindings are not load-balanced.
        for instances in self.root.values():
            for instance in instances:
                return instance
        return None


def parse_binding_payload(raw: str) -> ServiceBindingPayload:
    try:
        return ServiceBindingPayload.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedBindingPayload(
            f"invalid VCAP_SERVICES payload ({exc.error_count()} error(s))"
        ) from exc


def _parse_port(raw: str) -> int:
    # ASCII digits only: no whitespace, underscores or non-ASCII numerals.
    if not _PORT_PATTERN.fullmatch(raw):
        raise InvalidPort(raw)
    port = int(raw)
    if not 1 <= port <= 65535:
        raise InvalidPort(raw)
    return port


def _resolve_local(settings: Settings) -> ConnectionDescriptor:
    host = settings.valkey_host
    if not host:
        raise MissingHost()

    password = settings.valkey_password
    if not password:
        raise MissingPassword()

    username = settings.valkey_username
    if not username:
        raise MissingUsername()

    raw_port = settings.valkey_port
    if not raw_port:
        raise MissingPort()

    return ConnectionDescriptor(
        host=host,
        port=_parse_port(raw_port),
        username=username,
        password=SecretStr(password),
    )


def _resolve_platform(raw: str) -> ConnectionDescriptor:
    payload = parse_binding_payload(raw)
    instance = payload.first_instance()
    if instance is None:
        raise NoServiceInstances()
    # Platform-supplied fields are trusted as-is (no emptiness checks).
    return instance.to_descriptor()


def resolve(settings: Settings) -> ConnectionDescriptor:
    """Resolve connection credentials from settings.

    Re-evaluated on every call; outcomes are never cached since the platform may
    rebind services between restarts.

    Raises:
        ResolutionError: a ``ConfigurationError`` (local mode) or a
            ``PayloadError`` (platform mode).
    """

    try:
        if settings.vcap_services:
            return _resolve_platform(settings.vcap_services)
        return _resolve_local(settings)
    except ResolutionError as exc:
        logger.warning("Credential resolution failed: %s", exc)
        raise
