"""Gem metadata from the rubygems.org API."""

from __future__ import annotations

import logging

import httpx

log = logging.getLogger(__name__)

RUBYGEMS_API = "https://rubygems.org/api/v1/gems"


class MetadataParseFailure(Exception):
    """The registry answered with something that isn't gem metadata."""


def fetch_gem_info(name: str, client: httpx.Client | None = None) -> dict:
    """Fetch the metadata document for ``name``.

    Raises:
        MetadataParseFailure: If the body isn't a JSON object.
        httpx.HTTPError: On transport errors or a non-2xx status.
    """
    url = f"{RUBYGEMS_API}/{name}.json"
    log.debug("GET %s", url)
    response = client.get(url) if client else httpx.get(url)
    response.raise_for_status()
    try:
        info = response.json()
    except ValueError as e:
        raise MetadataParseFailure(f"{name}: {e}") from e
    if not isinstance(info, dict):
        kind = type(info).__name__
        raise MetadataParseFailure(f"{name}: expected an object, got {kind}")
    return info


def source_uri(name: str, client: httpx.Client | None = None) -> str:
    """Source code URI of a gem, else its homepage, else "".

    Lookup problems never raise; the pull request is just sent without links.
    """
    try:
        info = fetch_gem_info(name, client)
    except (MetadataParseFailure, httpx.HTTPError) as e:
        log.warning("no metadata for %s: %s", name, e)
        return ""
    return info.get("source_code_uri") or info.get("homepage_uri") or ""
