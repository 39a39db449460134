"""
haconnect.workspace
~~~~~~~~~~~~~~~~~~~
Private per-instance directory holding the generated configuration and
socket paths.  The directory is removed once shutdown is requested.
"""

from __future__ import annotations

import shutil
import sys
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path

from .logger import ConfigLogger
from .shutdown import Shutdown

_log = ConfigLogger()

DIR_PREFIX = "haproxy-connect-"


class ProvisioningError(Exception):
    pass


@dataclass(frozen=True, slots=True)
class Workspace:
    base: Path
    haproxy: Path
    spoe: Path
    spoe_sock: Path
    stats_sock: Path
    dataplane_sock: Path
    dataplane_transaction_dir: Path
    logs_sock: Path

    @classmethod
    def at(cls, base: str | Path) -> "Workspace":
        base = Path(base)
        return cls(
            base=base,
            haproxy=base / "haproxy.conf",
            spoe=base / "spoe.conf",
            spoe_sock=base / "spoe.sock",
            stats_sock=base / "haproxy.sock",
            dataplane_sock=base / "dataplane.sock",
            # created by the dataplane API itself
            dataplane_transaction_dir=base / "dataplane-transactions",
            logs_sock=base / "logs.sock",
        )


def provision(base_dir: str | Path, sd: Shutdown) -> Workspace:
    """Create a fresh private directory under *base_dir*.

    The cleanup obligation is registered on *sd* before the directory
    exists, so it is released exactly once whatever happens next.
    """
    sd.add(1)
    try:
        base = tempfile.mkdtemp(prefix=DIR_PREFIX, dir=str(base_dir))
    except OSError as e:
        sd.done()
        raise ProvisioningError(f"cannot create workspace in {base_dir}: {e}") from e

    ws = Workspace.at(base)
    threading.Thread(
        target=_cleanup,
        args=(ws.base, sd),
        name=f"cleanup-{ws.base.name}",
        daemon=True,
    ).start()

    _log.provisioned(ws.base)
    return ws


def _cleanup(base: Path, sd: Shutdown) -> None:
    try:
        sd.stop.wait()
        _log.cleaning(base)
        _remove_tree(base)
        if base.exists():
            raise OSError(f"entries left behind in {base}")
    except OSError as e:
        _log.cleanup_failed(base, e)
    finally:
        sd.done()


def _remove_tree(base: Path) -> None:
    # entries (or the whole tree) may vanish under us, e.g. sockets
    # unlinked by haproxy while it exits
    if sys.version_info >= (3, 12):
        shutil.rmtree(base, onexc=_ignore_missing)
    else:
        shutil.rmtree(base, onerror=lambda func, path, exc_info: _ignore_missing(func, path, exc_info[1]))


def _ignore_missing(func, path, exc) -> None:
    if not isinstance(exc, FileNotFoundError):
        raise exc
