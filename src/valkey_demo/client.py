from __future__ import annotations

import logging
import re
import ssl
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import redis

from valkey_demo.credentials import ConnectionDescriptor
from valkey_demo.errors import InvalidCaCertificate, StoreConnectionError

logger = logging.getLogger(__name__)

# Logical database index; not configurable.
DEFAULT_DB = 0

_PEM_CERTIFICATE = re.compile(
    r"-----BEGIN CERTIFICATE-----.*?-----END CERTIFICATE-----", re.DOTALL
)


class TrustRootSSLConnection(redis.SSLConnection):
    """SSL connection that verifies the server against a prebuilt context only.

    The stock SSLConnection starts from ``ssl.create_default_context()``, which
    also trusts the system CA store.
    """

    def __init__(self, *, ssl_context: ssl.SSLContext, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.ssl_context = ssl_context

    def _wrap_socket_with_ssl(self, sock):
        return self.ssl_context.wrap_socket(sock, server_hostname=self.host)


@dataclass(frozen=True)
class TlsOptions:
    ca_data: str
    server_hostname: str
    context: ssl.SSLContext = field(repr=False, compare=False)
    cert_reqs: str = "required"
    check_hostname: bool = True


@dataclass(frozen=True)
class ClientOptions:
    host: str
    port: int
    username: str
    password: str = field(repr=False)
    db: int = DEFAULT_DB
    tls: TlsOptions | None = None

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def to_pool_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "password": self.password,
            "db": self.db,
            "decode_responses": True,
        }
        if self.tls is not None:
            kwargs.update(
                connection_class=TrustRootSSLConnection,
                ssl_context=self.tls.context,
                ssl_ca_data=self.tls.ca_data,
                ssl_cert_reqs=self.tls.cert_reqs,
                ssl_check_hostname=self.tls.check_hostname,
            )
        return kwargs


def _load_cadata(context: ssl.SSLContext, pem: str) -> bool:
    try:
        context.load_verify_locations(cadata=pem)
    except (ssl.SSLError, ValueError, TypeError):
        return False
    return True


def load_trust_root(pem: str) -> tuple[ssl.SSLContext, str]:
    """Parse a PEM bundle into a verifying SSL context.

    Blocks that fail to parse are skipped. Returns the context together with the
    PEM text of the certificates it trusts. Raises InvalidCaCertificate when no
    certificate can be extracted.
    """

    valid: list[str] = []
    for block in _PEM_CERTIFICATE.findall(pem or ""):
        if _load_cadata(ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT), block):
            valid.append(block)
        else:
            logger.warning("Skipping unparseable certificate in `cacrt`")
    if not valid:
        raise InvalidCaCertificate()

    ca_data = "\n".join(valid) + "\n"
    # Only the given bundle is trusted; system roots are not loaded.
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    if not _load_cadata(context, ca_data):
        raise InvalidCaCertificate()
    return context, ca_data


def build_client_options(descriptor: ConnectionDescriptor) -> ClientOptions:
    tls: TlsOptions | None = None
    if descriptor.ca_certificate is not None:
        # Never fall back to plaintext on a bad trust root.
        context, ca_data = load_trust_root(descriptor.ca_certificate)
        tls = TlsOptions(ca_data=ca_data, server_hostname=descriptor.host, context=context)

    return ClientOptions(
        host=descriptor.host,
        port=descriptor.port,
        username=descriptor.username,
        password=descriptor.password.get_secret_value(),
        tls=tls,
    )


def build_client(descriptor: ConnectionDescriptor, *, connect: bool = True) -> redis.Redis:
    """Build a store client for the descriptor.

    With ``connect=True`` the handshake (auth, TLS, SELECT) is performed eagerly via
    PING so connection problems surface here rather than on the first command.
    """

    options = build_client_options(descriptor)
    logger.info(
        "Connecting to %s as %s (tls=%s)",
        options.address,
        options.username,
        "on" if options.tls is not None else "off",
    )

    # from_pool hands pool ownership to the client, so close() disconnects it.
    client = redis.Redis.from_pool(redis.ConnectionPool(**options.to_pool_kwargs()))
    if connect:
        try:
            client.ping()
        except redis.RedisError as exc:
            client.close()
            raise StoreConnectionError(f"Failed to connect to {options.address}: {exc}") from exc
    return client


@contextmanager
def open_client(descriptor: ConnectionDescriptor) -> Iterator[redis.Redis]:
    """Yield a connected client, closing it on every exit path."""

    client = build_client(descriptor)
    try:
        yield client
    finally:
        client.close()
