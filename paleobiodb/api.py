"""
Paleobiology Database API client.

This module turns named filter parameters into PBDB data service requests
and decodes the returned CSV into a ``pandas.DataFrame``:
- Comma-joining of multi-valued parameters
- URI construction against a version-pathed base address
- A single synchronous GET per call, no retries
- Detection of error payloads the service returns with HTTP 200
"""

from __future__ import annotations

import io
import json
import re
from collections.abc import Mapping, Set
from dataclasses import dataclass
from numbers import Number
from typing import Any
from urllib.parse import urlencode

import pandas as pd
import requests

from paleobiodb.utils import get_logger

# PBDB data service base URL (version path included)
PBDB_API_BASE = "https://paleobiodb.org/data1.2/"

# Response format requested from the service
DEFAULT_FORMAT = "csv"

# The service's own default applies unless the caller sets one
DEFAULT_TIMEOUT = None

USER_AGENT = "paleobiodb-client/1.0 (Python)"

# First line of a plain-text error body, e.g. "Errors:" or "ERROR: bad param"
_ERROR_LINE = re.compile(r'^"?errors?"?\s*:"?', re.IGNORECASE)


class PBDBError(Exception):
    """Base exception for PBDB client errors."""

    def __init__(self, message: str, uri: str | None = None):
        super().__init__(message)
        self.message = message
        self.uri = uri

    def __str__(self) -> str:
        if self.uri:
            return f"{self.message} (uri: {self.uri})"
        return self.message


class InvalidArgument(PBDBError, ValueError):
    """Raised when a parameter has a shape the API cannot accept."""

    pass


class TransportError(PBDBError):
    """Raised when the request could not be completed."""

    pass


class RemoteError(PBDBError):
    """Raised when the service is reachable but reports a failure."""

    def __init__(
        self,
        message: str,
        uri: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, uri=uri)
        self.status_code = status_code


class DecodeError(PBDBError):
    """Raised when a response body is not parseable as a table."""

    pass


@dataclass(frozen=True)
class Endpoint:
    """
    A resource exposed by the PBDB data service.

    Attributes:
        name: Wrapper/resource name (e.g. "occurrences")
        path: Endpoint path below the API base (e.g. "occs/list")
        requires_id: Whether callers must pass an ``id``
        description: One-line summary shown by the CLI
    """

    name: str
    path: str
    requires_id: bool = False
    description: str = ""


ENDPOINTS: dict[str, Endpoint] = {
    endpoint.name: endpoint
    for endpoint in (
        Endpoint("occurrence", "occs/single", True, "A single fossil occurrence"),
        Endpoint("occurrences", "occs/list", False, "Fossil occurrences"),
        Endpoint("ref_occurrences", "occs/refs", False, "References for occurrences"),
        Endpoint("collection", "colls/single", True, "A single collection"),
        Endpoint("collections", "colls/list", False, "Collections"),
        Endpoint("collections_geo", "colls/summary", False, "Geographic clusters of collections"),
        Endpoint("taxon", "taxa/single", False, "A single taxonomic name"),
        Endpoint("taxa", "taxa/list", False, "Taxonomic names"),
        Endpoint("taxa_auto", "taxa/auto", False, "Taxonomic name autocomplete"),
        Endpoint("interval", "intervals/single", True, "A single time interval"),
        Endpoint("intervals", "intervals/list", False, "Time intervals"),
        Endpoint("scale", "scales/single", True, "A single time scale"),
        Endpoint("scales", "scales/list", False, "Time scales"),
        Endpoint("strata", "strata/list", False, "Geological strata"),
        Endpoint("strata_auto", "strata/auto", False, "Stratum name autocomplete"),
        Endpoint("reference", "refs/single", True, "A single bibliographic reference"),
        Endpoint("references", "refs/list", False, "Bibliographic references"),
        Endpoint("ref_collections", "colls/refs", False, "References for collections"),
        Endpoint("ref_taxa", "taxa/refs", False, "References for taxa"),
    )
}

ENDPOINT_PATHS = frozenset(endpoint.path for endpoint in ENDPOINTS.values())


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, Number)) or pd.api.types.is_bool(value)


def serialize(value: Any) -> str:
    """
    Convert a parameter value into the API's comma-list form.

    Args:
        value: A scalar, or an ordered sequence of scalars

    Returns:
        The scalar as a string, or the elements joined with "," in order

    Raises:
        InvalidArgument: For mappings, sets, None, empty sequences or
            sequences holding anything other than scalars
    """
    if _is_scalar(value):
        return str(value)

    if isinstance(value, (Mapping, Set, bytes)) or not pd.api.types.is_list_like(value):
        raise InvalidArgument(
            f"Expected a scalar or a sequence of scalars, got {type(value).__name__}"
        )

    items = list(value)
    if not items:
        raise InvalidArgument("Expected at least one value, got an empty sequence")

    for item in items:
        if not _is_scalar(item):
            raise InvalidArgument(
                f"Sequence values must be scalars, got {type(item).__name__}"
            )

    # Embedded commas are passed through; the service splits on them.
    return ",".join(str(item) for item in items)


def serialize_query(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Serialize every value of a query mapping."""
    if params is None:
        return {}
    if not isinstance(params, Mapping):
        raise InvalidArgument(
            f"Query must be a mapping, got {type(params).__name__}"
        )
    return {str(name): serialize(value) for name, value in params.items()}


def build_uri(
    endpoint: str,
    params: Mapping[str, Any] | None = None,
    base_url: str = PBDB_API_BASE,
    fmt: str = DEFAULT_FORMAT,
) -> str:
    """
    Build the request URI for an endpoint and query.

    Args:
        endpoint: Endpoint path (e.g. "occs/list")
        params: Query mapping; values are serialized first
        base_url: API base address including the version path
        fmt: Response format suffix

    Returns:
        Fully-qualified URI; no "?" when the query is empty
    """
    if not base_url.endswith("/"):
        base_url += "/"

    uri = f"{base_url}{endpoint}.{fmt}"

    serialized = serialize_query(params)
    if serialized:
        uri = f"{uri}?{urlencode(serialized)}"

    return uri


def _error_from_payload(payload: Any) -> str | None:
    """Extract an error message from a decoded JSON body, if it holds one."""
    if not isinstance(payload, dict):
        return None

    for key in ("errors", "error"):
        value = payload.get(key)
        if not value:
            continue
        if isinstance(value, (list, tuple)):
            return "; ".join(str(item) for item in value)
        if isinstance(value, dict):
            return str(value.get("message") or value)
        return str(value)

    return None


def _error_from_text(text: str) -> str | None:
    """Extract an error message from a plain-text body, if it holds one."""
    lines = [line.strip().strip('"') for line in text.strip().splitlines()]
    lines = [line for line in lines if line]
    if not lines or not _ERROR_LINE.match(lines[0]):
        return None

    head = _ERROR_LINE.sub("", lines[0]).strip()
    messages = ([head] if head else []) + lines[1:]
    return "; ".join(messages) or lines[0]


def decode_table(text: str, uri: str | None = None) -> pd.DataFrame:
    """
    Decode a CSV response body into a DataFrame.

    Args:
        text: Response body
        uri: Request URI, attached to any error raised

    Returns:
        DataFrame with the header columns; zero rows when the body has
        no records, and no columns when the body is empty

    Raises:
        RemoteError: If the body is an error payload
        DecodeError: If the body is not CSV
    """
    body = text.lstrip("\ufeff").strip()

    if not body:
        return pd.DataFrame()

    if body[0] in "{[":
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise DecodeError(f"Response is neither CSV nor valid JSON: {e}", uri=uri) from e

        message = _error_from_payload(payload)
        if message:
            raise RemoteError(message, uri=uri, status_code=200)
        raise DecodeError("Expected CSV but the service returned JSON", uri=uri)

    if body[0] == "<":
        raise DecodeError("Expected CSV but the service returned HTML/XML", uri=uri)

    message = _error_from_text(body)
    if message:
        raise RemoteError(message, uri=uri, status_code=200)

    try:
        return pd.read_csv(io.StringIO(body))
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except pd.errors.ParserError as e:
        raise DecodeError(f"Could not parse CSV response: {e}", uri=uri) from e


def merge_params(*sources: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Merge query mappings into one, keeping first-seen order.

    Raises:
        InvalidArgument: If a source is not a mapping or a name appears
            in more than one source
    """
    merged: dict[str, Any] = {}

    for source in sources:
        if source is None:
            continue
        if not isinstance(source, Mapping):
            raise InvalidArgument(f"Query must be a mapping, got {type(source).__name__}")

        for name, value in source.items():
            if name in merged:
                raise InvalidArgument(f"Parameter '{name}' given more than once")
            merged[name] = value

    return merged


class PBDBClient:
    """
    Client for the Paleobiology Database data service.

    Holds configuration and an HTTP session only; no results are kept
    between calls.

    Example:
        with PBDBClient() as client:
            df = client.query("occs/list", {"base_name": "Canidae", "show": ["coords"]})
    """

    def __init__(
        self,
        base_url: str = PBDB_API_BASE,
        timeout: float | tuple[float, float] | None = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        fmt: str = DEFAULT_FORMAT,
    ):
        """
        Initialize the client.

        Args:
            base_url: API base address including the version path
            timeout: Request timeout in seconds (None uses the transport default)
            session: Existing session to use instead of creating one
            fmt: Response format suffix appended to endpoint paths
        """
        self.base_url = base_url
        self.timeout = timeout
        self.fmt = fmt
        self.logger = get_logger()

        self._owns_session = session is None
        self.session = session if session is not None else self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with default headers."""
        session = requests.Session()
        session.headers.update(
            {
                "Accept": "text/csv, text/plain;q=0.9, */*;q=0.1",
                "User-Agent": USER_AGENT,
            }
        )
        return session

    def build_uri(self, endpoint: str, params: Mapping[str, Any] | None = None) -> str:
        """Build the request URI for an endpoint against this client's base."""
        return build_uri(endpoint, params, base_url=self.base_url, fmt=self.fmt)

    def query(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
    ) -> pd.DataFrame:
        """
        Send a query to an endpoint and return the decoded table.

        Args:
            endpoint: Endpoint path (e.g. "occs/list")
            params: Query mapping; list values become comma lists

        Returns:
            DataFrame of results

        Raises:
            InvalidArgument: For unknown endpoints or malformed values
            TransportError: If the request could not be completed
            RemoteError: If the service reports an error
            DecodeError: If the body is not a table
        """
        if endpoint not in ENDPOINT_PATHS:
            raise InvalidArgument(f"Unknown endpoint: {endpoint}")

        uri = self.build_uri(endpoint, params)
        df = self.fetch(uri)
        df.attrs["endpoint"] = endpoint
        return df

    def call(
        self,
        name: str,
        id: Any = None,
        query: Mapping[str, Any] | None = None,
        **params: Any,
    ) -> pd.DataFrame:
        """
        Query a resource by its wrapper name (e.g. "occurrences").

        Args:
            name: Resource name from ``ENDPOINTS``
            id: Record identifier, sent as the ``id`` parameter
            query: Query mapping
            **params: Further query parameters

        Raises:
            InvalidArgument: For unknown names, a missing mandatory id, or
                duplicate parameters
        """
        endpoint = ENDPOINTS.get(name)
        if endpoint is None:
            raise InvalidArgument(f"Unknown resource: {name}")

        identifier = {"id": id} if id is not None else None
        merged = merge_params(identifier, query, params)

        if endpoint.requires_id and "id" not in merged:
            raise InvalidArgument(f"'{name}' requires an id")

        return self.query(endpoint.path, merged)

    def fetch(self, uri: str) -> pd.DataFrame:
        """
        Issue a GET request and decode the response into a DataFrame.

        Args:
            uri: Fully-qualified request URI

        Returns:
            DataFrame of results, with ``attrs["uri"]`` set

        Raises:
            TransportError: If the request could not be completed
            RemoteError: If the service returns a non-2xx status or an
                error payload
            DecodeError: If the body is not a table
        """
        self.logger.debug(f"GET {uri}")

        try:
            response = self.session.get(uri, timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"Connection error: {e}", uri=uri) from e
        except requests.exceptions.Timeout as e:
            raise TransportError(f"Request timeout: {e}", uri=uri) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}", uri=uri) from e

        content_type = response.headers.get("Content-Type", "")
        if "charset" not in content_type.lower():
            response.encoding = "utf-8"
        text = response.text

        if not 200 <= response.status_code < 300:
            raise RemoteError(
                self._error_message(response, text),
                uri=uri,
                status_code=response.status_code,
            )

        if "html" in content_type.lower():
            raise DecodeError(f"Unexpected content type: {content_type}", uri=uri)

        df = decode_table(text, uri=uri)
        df.attrs["uri"] = uri

        self.logger.debug(f"Decoded {len(df):,} rows, {len(df.columns)} columns")
        return df

    @staticmethod
    def _error_message(response: requests.Response, text: str) -> str:
        """Best-effort message for a failed response."""
        body = text.strip()
        message = None

        if body.startswith("{"):
            try:
                message = _error_from_payload(json.loads(body))
            except ValueError:
                message = None

        if message is None and body and not body.startswith("<"):
            message = _error_from_text(body) or body[:500]

        if message is None:
            message = response.reason or "no message"

        return f"HTTP {response.status_code}: {message}"

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> PBDBClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit."""
        self.close()


def query(endpoint: str, params: Mapping[str, Any] | None = None) -> pd.DataFrame:
    """
    Send a query with a short-lived client.

    Example:
        query("occs/list", {"base_name": "Canidae", "show": ["coords", "phylo"]})
    """
    with PBDBClient() as client:
        return client.query(endpoint, params)
