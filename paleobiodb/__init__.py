"""
paleobiodb - Query the Paleobiology Database from Python.

This package wraps the PBDB data service (https://paleobiodb.org/data1.2/)
with one function per resource. Filters are passed as keyword arguments or a
mapping, list values are sent as comma lists, and every call returns a
pandas DataFrame.

Resources:
- Occurrences, collections and their references
- Taxa, taxon autocomplete and taxon references
- Time intervals and time scales
- Strata and stratum autocomplete
- Bibliographic references

Example CLI usage:
    pbdb fetch occurrences -p base_name=Canidae -p show=coords -p show=phylo
    pbdb fetch occurrence --id 1001 --vocab pbdb

Example Python usage:
    from paleobiodb import occurrences

    df = occurrences(base_name="Canidae", show=["coords", "phylo"], vocab="pbdb")
"""

__version__ = "1.0.0"

from paleobiodb.api import (
    ENDPOINTS,
    DecodeError,
    Endpoint,
    InvalidArgument,
    PBDBClient,
    PBDBError,
    RemoteError,
    TransportError,
    build_uri,
    query,
    serialize,
)
from paleobiodb.config import Config
from paleobiodb.endpoints import (
    collection,
    collections,
    collections_geo,
    interval,
    intervals,
    occurrence,
    occurrences,
    ref_collections,
    ref_occurrences,
    ref_taxa,
    reference,
    references,
    scale,
    scales,
    strata,
    strata_auto,
    taxa,
    taxa_auto,
    taxon,
)

__all__ = [
    "PBDBClient",
    "PBDBError",
    "InvalidArgument",
    "TransportError",
    "RemoteError",
    "DecodeError",
    "Endpoint",
    "ENDPOINTS",
    "Config",
    "build_uri",
    "query",
    "serialize",
    "occurrence",
    "occurrences",
    "ref_occurrences",
    "collection",
    "collections",
    "collections_geo",
    "ref_collections",
    "taxon",
    "taxa",
    "taxa_auto",
    "ref_taxa",
    "interval",
    "intervals",
    "scale",
    "scales",
    "strata",
    "strata_auto",
    "reference",
    "references",
    "__version__",
]
