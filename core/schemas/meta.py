#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Metadata block shared by API responses and CLI summaries."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from core.schemas.recipes import DatasetMeta
from core.version import versions


def now_iso() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def build_meta(
    dataset_meta: DatasetMeta,
    *,
    counts: Optional[Dict[str, int]] = None,
    sources: Optional[Dict[str, Any]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    meta: Dict[str, Any] = {
        "dataset": dataset_meta.to_dict(),
        "generated": now_iso(),
    }
    meta.update(versions())
    if counts:
        meta["counts"] = dict(counts)
    if sources:
        meta["sources"] = sources
    if extra:
        meta.update(extra)
    return meta
