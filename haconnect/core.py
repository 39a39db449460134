"""
haconnect.core
~~~~~~~~~~~~~~
Builds a ready-to-use HAProxy configuration workspace: private directory,
merged parameters, rendered config files and dataplane credentials.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .auth import Credentials
from .config import Config
from .logger import configure_logging
from .materialize import materialize
from .params import ParameterSet, default_params, merge
from .shutdown import Shutdown, install_signal_handlers
from .workspace import Workspace, provision


@dataclass(frozen=True, slots=True)
class RenderedConfig:
    workspace: Workspace
    credentials: Credentials

    @property
    def haproxy_args(self) -> List[str]:
        return ["-f", str(self.workspace.haproxy)]

    @property
    def dataplane_url(self) -> str:
        return f"unix://{self.workspace.dataplane_sock}"


def new_config(
    base_dir: str | Path,
    params: Optional[ParameterSet],
    sd: Shutdown,
) -> RenderedConfig:
    """Provision a workspace under *base_dir* and write its config files.

    On error the workspace (if it was created) is still removed when *sd*
    is stopped.
    """
    ws = provision(base_dir, sd)
    effective = merge(default_params(), params or {})
    credentials = materialize(ws, effective)
    return RenderedConfig(workspace=ws, credentials=credentials)


def run(config: Config) -> None:
    configure_logging(config.log_path or None)

    sd = Shutdown()
    install_signal_handlers(sd)
    try:
        rendered = new_config(config.base_dir, config.params, sd)
        print(f"▸ HAProxy config ready in {rendered.workspace.base}")
        print(f"▸ haproxy {' '.join(rendered.haproxy_args)}")
        print(f"▸ dataplane API at {rendered.dataplane_url}")
        sd.stop.wait()
    finally:
        sd.request_stop("exiting")
        sd.wait()
    print("\n▸ Config cleaned up.")
