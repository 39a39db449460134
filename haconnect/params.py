"""
haconnect.params
~~~~~~~~~~~~~~~~
Grouped HAProxy directives and the merge of built-in defaults with
operator overrides.

A parameter set maps a section name ("global", "defaults") to a mapping of
directive keyword -> argument lines.  A keyword may carry several lines;
each one is emitted as ``<keyword> <argument>``.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, List

ParameterSet = Dict[str, Dict[str, List[str]]]

GROUPS = ("global", "defaults")


def available_processors() -> int:
    """Number of CPUs this process may actually run on."""
    if hasattr(os, "sched_getaffinity"):
        try:
            return max(1, len(os.sched_getaffinity(0)))
        except OSError:
            pass
    return max(1, os.cpu_count() or 1)


def default_params() -> ParameterSet:
    return {
        "global": {
            "stats": ["timeout 2m"],
            "tune.ssl.default-dh-param": ["1024"],
            "nbthread": [str(available_processors())],
            "ulimit-n": ["65536"],
            "maxconn": ["32000"],
        },
        "defaults": {
            "http-reuse": ["always"],
        },
    }


def merge(defaults: ParameterSet, overrides: ParameterSet) -> ParameterSet:
    """Return a new set where *overrides* replace *defaults* keyword by keyword.

    Lines are never appended across the two inputs: an overridden keyword
    keeps only the override's lines.  Neither input is modified.
    """
    merged: ParameterSet = {}
    for source in (defaults, overrides):
        for group, directives in source.items():
            target = merged.setdefault(group, {})
            for keyword, lines in directives.items():
                target[keyword] = list(lines)
    return merged


def parse_param(item: str) -> tuple[str, str, str]:
    """Split ``global.maxconn=5000`` into ``("global", "maxconn", "5000")``."""
    key, sep, value = item.partition("=")
    if not sep:
        raise ValueError(f"invalid parameter {item!r}: expected <group>.<keyword>=<value>")
    group, dot, keyword = key.strip().partition(".")
    if not dot or not keyword:
        raise ValueError(f"invalid parameter {item!r}: missing directive keyword")
    if group not in GROUPS:
        raise ValueError(f"invalid parameter {item!r}: unknown group {group!r}")
    return group, keyword, value.strip()


def parse_params(items: Iterable[str]) -> ParameterSet:
    params: ParameterSet = {}
    for item in items:
        group, keyword, value = parse_param(item)
        params.setdefault(group, {}).setdefault(keyword, []).append(value)
    return params
