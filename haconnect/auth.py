"""
haconnect.auth
~~~~~~~~~~~~~~
Ephemeral Basic-Auth credentials for the local dataplane API socket.
A fresh password is generated for every workspace and only ever written
into that workspace's haproxy.conf.
"""

from __future__ import annotations

import base64
import secrets
from dataclasses import dataclass, field

# intentionally differs from the "hapeoxy" spelling of older haproxy-connect releases
DATAPLANE_USER = "haproxy"
PASSWORD_BYTES = 32


@dataclass(frozen=True, slots=True)
class Credentials:
    username: str
    password: str = field(repr=False)

    def authorization(self) -> str:
        """Value for the ``Authorization`` header of a dataplane client."""
        raw = f"{self.username}:{self.password}".encode()
        return "Basic " + base64.b64encode(raw).decode("ascii")


def generate_credentials() -> Credentials:
    return Credentials(username=DATAPLANE_USER, password=_random_password())


def _random_password() -> str:
    raw = secrets.token_bytes(PASSWORD_BYTES)
    if len(raw) != PASSWORD_BYTES:
        raise RuntimeError("random source returned a short read")
    return base64.urlsafe_b64encode(raw).decode("ascii")
