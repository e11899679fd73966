"""
One function per PBDB resource.

Every function forwards its parameters to the matching endpoint. Filters can
be given as keyword arguments, as a ``query`` mapping, or both; list values
are sent as comma-separated lists. Full parameter documentation lives at
https://paleobiodb.org/data1.2/.

Pass ``client=`` to reuse a configured :class:`PBDBClient`; otherwise each
call opens and closes its own.

Example:
    from paleobiodb import occurrences

    df = occurrences(base_name="Canidae", show=["coords", "phylo"], vocab="pbdb")
"""

from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from paleobiodb.api import PBDBClient, merge_params


def _call(
    name: str,
    record_id: Any,
    query: Mapping[str, Any] | None,
    client: PBDBClient | None,
    params: dict[str, Any],
) -> pd.DataFrame:
    # A list endpoint may still receive "id" through params
    identifier = {"id": record_id} if record_id is not None else None
    merged = merge_params(identifier, query, params)

    if client is not None:
        return client.call(name, query=merged)

    with PBDBClient() as owned:
        return owned.call(name, query=merged)


# Occurrences


def occurrence(id, query=None, *, client=None, **params) -> pd.DataFrame:
    """
    A single occurrence record (``occs/single``).

    Example:
        occurrence(1001, vocab="pbdb", show="coords")
    """
    return _call("occurrence", id, query, client, params)


def occurrences(query=None, *, client=None, **params) -> pd.DataFrame:
    """
    Occurrence records matching the filters (``occs/list``).

    Common filters: ``base_name``, ``taxon_name``, ``interval``,
    ``min_ma``/``max_ma``, ``lngmin``/``lngmax``/``latmin``/``latmax``,
    ``continent``, ``show``, ``limit`` ("all" lifts the default cap).

    Example:
        occurrences(base_name="Canidae", limit="all", show=["coords", "phylo", "ident"])
    """
    return _call("occurrences", None, query, client, params)


def ref_occurrences(query=None, *, client=None, **params) -> pd.DataFrame:
    """References associated with occurrences (``occs/refs``)."""
    return _call("ref_occurrences", None, query, client, params)


# Collections


def collection(id, query=None, *, client=None, **params) -> pd.DataFrame:
    """A single collection (``colls/single``)."""
    return _call("collection", id, query, client, params)


def collections(query=None, *, client=None, **params) -> pd.DataFrame:
    """Collections matching the filters (``colls/list``)."""
    return _call("collections", None, query, client, params)


def collections_geo(query=None, *, client=None, **params) -> pd.DataFrame:
    """
    Geographic clusters of collections (``colls/summary``).

    Clusters exist at several summary ``level`` values to support maps at
    low resolution.

    Example:
        collections_geo(lngmin=0.0, lngmax=15.0, latmin=0.0, latmax=15.0, level=2)
    """
    return _call("collections_geo", None, query, client, params)


def ref_collections(query=None, *, client=None, **params) -> pd.DataFrame:
    """References associated with collections (``colls/refs``)."""
    return _call("ref_collections", None, query, client, params)


# Taxa


def taxon(query=None, *, client=None, **params) -> pd.DataFrame:
    """
    A single taxonomic name, selected by ``name`` or ``id`` (``taxa/single``).

    Example:
        taxon(name="Canis", show=["attr", "app", "size"])
    """
    return _call("taxon", None, query, client, params)


def taxa(query=None, *, client=None, **params) -> pd.DataFrame:
    """
    Multiple taxonomic names (``taxa/list``).

    ``rel`` selects related names, e.g. "children", "synonyms" or
    "common_ancestor".
    """
    return _call("taxa", None, query, client, params)


def taxa_auto(query=None, *, client=None, **params) -> pd.DataFrame:
    """Names matching a prefix of at least three letters (``taxa/auto``)."""
    return _call("taxa_auto", None, query, client, params)


def ref_taxa(query=None, *, client=None, **params) -> pd.DataFrame:
    """References associated with taxa (``taxa/refs``)."""
    return _call("ref_taxa", None, query, client, params)


# Time


def interval(id, query=None, *, client=None, **params) -> pd.DataFrame:
    """A single geologic time interval (``intervals/single``)."""
    return _call("interval", id, query, client, params)


def intervals(query=None, *, client=None, **params) -> pd.DataFrame:
    """Time intervals (``intervals/list``)."""
    return _call("intervals", None, query, client, params)


def scale(id, query=None, *, client=None, **params) -> pd.DataFrame:
    """A single time scale (``scales/single``)."""
    return _call("scale", id, query, client, params)


def scales(query=None, *, client=None, **params) -> pd.DataFrame:
    """Time scales; with no filters, all of them (``scales/list``)."""
    return _call("scales", None, query, client, params)


# Strata


def strata(query=None, *, client=None, **params) -> pd.DataFrame:
    """Geological strata (``strata/list``)."""
    return _call("strata", None, query, client, params)


def strata_auto(query=None, *, client=None, **params) -> pd.DataFrame:
    """Stratum names matching a prefix (``strata/auto``)."""
    return _call("strata_auto", None, query, client, params)


# References


def reference(id, query=None, *, client=None, **params) -> pd.DataFrame:
    """A single bibliographic reference (``refs/single``)."""
    return _call("reference", id, query, client, params)


def references(query=None, *, client=None, **params) -> pd.DataFrame:
    """Bibliographic references (``refs/list``)."""
    return _call("references", None, query, client, params)
