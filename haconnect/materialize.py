"""
haconnect.materialize
~~~~~~~~~~~~~~~~~~~~~
Renders haproxy.conf from the merged parameters and writes it, together
with the static SPOE agent configuration, into a workspace.
"""

from __future__ import annotations

import os
from pathlib import Path

import jinja2
from jinja2 import Environment, StrictUndefined

from .auth import Credentials, generate_credentials
from .logger import ConfigLogger
from .params import ParameterSet
from .workspace import Workspace

_log = ConfigLogger()

FILE_MODE = 0o600

HAPROXY_TEMPLATE = """\
global
\tmaster-worker
\tstats socket {{ socket_path }} mode 600 level admin expose-fd listeners
{% for keyword, lines in global_params|dictsort(true) %}
{% for line in lines %}
\t{{ keyword }} {{ line }}
{% endfor %}
{% endfor %}

defaults
{% for keyword, lines in default_params|dictsort(true) %}
{% for line in lines %}
\t{{ keyword }} {{ line }}
{% endfor %}
{% endfor %}
\tcompression algo gzip
\tcompression type text/css text/html text/javascript application/javascript text/plain text/xml application/json

userlist controller
\tuser {{ username }} insecure-password {{ password }}
"""

SPOE_CONFIG = """\
[intentions]

spoe-agent intentions-agent
\tmessages check-intentions

\toption var-prefix connect

\ttimeout hello      3000ms
\ttimeout idle       3000s
\ttimeout processing 3000ms

\tuse-backend spoe_back

spoe-message check-intentions
\targs ip=src cert=ssl_c_der
\tevent on-frontend-tcp-request
"""

# Plain-text config: no HTML escaping.
_ENV = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


class TemplateError(Exception):
    """The built-in template could not be rendered.  Always a bug."""


class MaterializationError(Exception):
    pass


def render_haproxy_config(
    workspace: Workspace,
    credentials: Credentials,
    params: ParameterSet,
) -> str:
    try:
        tmpl = _ENV.from_string(HAPROXY_TEMPLATE)
        return tmpl.render(
            socket_path=str(workspace.stats_sock),
            global_params=params.get("global", {}),
            default_params=params.get("defaults", {}),
            username=credentials.username,
            password=credentials.password,
        )
    except jinja2.TemplateError as e:
        raise TemplateError(f"cannot render haproxy config: {e}") from e


def materialize(workspace: Workspace, params: ParameterSet) -> Credentials:
    """Write haproxy.conf and spoe.conf; return the dataplane credentials.

    Any I/O failure is raised as MaterializationError.  The workspace
    directory is left as is; its cleanup is already scheduled.
    """
    credentials = generate_credentials()
    text = render_haproxy_config(workspace, credentials, params)

    _write(workspace.haproxy, text)
    _write(workspace.spoe, SPOE_CONFIG)
    return credentials


def _owner_only(path: str, flags: int) -> int:
    fd = os.open(path, flags, FILE_MODE)
    try:
        # O_CREAT mode is ignored for a file that already exists
        os.fchmod(fd, FILE_MODE)
    except OSError:
        os.close(fd)
        raise
    return fd


def _write(path: Path, content: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", opener=_owner_only) as fh:
            fh.write(content)
    except OSError as e:
        raise MaterializationError(f"cannot write {path}: {e}") from e
    _log.written(path, len(content.encode("utf-8")))
