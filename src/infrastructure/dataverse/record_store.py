"""Dataverse Web API record store.

Implements RecordStoreProtocol over the Dataverse (Dynamics 365) OData Web
API. Handles:
- Request execution with timeout/connection error handling
- Response status code interpretation
- JSON parsing (numbers kept as Decimal)
- Translation between logical attribute names and Web API property names

Lookup attributes are exposed by the Web API as ``_<name>_value`` when
read and written with ``<name>@odata.bind``; the store takes care of both
so callers only see logical names and EntityReference values.

Architecture:
    - Infrastructure layer (adapter for an external API)
    - Uses httpx for async HTTP
    - Raises RecordStoreError; the handler turns it into a Failure

Usage:
    store = DataverseRecordStore(
        base_url="https://contoso.crm.dynamics.com",
        access_token=token,
    )
    record = await store.retrieve("quote", quote_id, ("statuscode",))
"""

import json
from collections.abc import Mapping, Sequence
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

import httpx
import structlog

from src.core.constants import (
    OPPORTUNITY_ENTITY,
    QUOTE_ENTITY,
    RECORD_STORE_TIMEOUT_DEFAULT,
    RESPONSE_BODY_MAX_LENGTH,
)
from src.core.enums import ErrorCode
from src.core.errors import RecordStoreError
from src.domain.value_objects.entity_reference import EntityReference
from src.domain.value_objects.money import Money
from src.domain.value_objects.query_expression import (
    ConditionExpression,
    QueryExpression,
    comparable_value,
)
from src.domain.value_objects.record import Record

DEFAULT_ENTITY_SETS: dict[str, str] = {
    QUOTE_ENTITY: "quotes",
    OPPORTUNITY_ENTITY: "opportunities",
}

# entity -> {lookup attribute -> referenced entity}
DEFAULT_LOOKUPS: dict[str, dict[str, str]] = {
    QUOTE_ENTITY: {"opportunityid": OPPORTUNITY_ENTITY},
}


class DataverseRecordStore:
    """Record store speaking the Dataverse Web API.

    Attributes:
        _api_url: Web API root (``{base_url}/api/data/{version}``).
        _access_token: OAuth bearer token, or None when a proxy injects it.
        _timeout: HTTP request timeout in seconds.
        _entity_sets: Entity logical name to entity set name.
        _lookups: Lookup attributes per entity.
        _logger: Structured logger.
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_version: str = "v9.2",
        access_token: str | None = None,
        timeout: float = RECORD_STORE_TIMEOUT_DEFAULT,
        entity_sets: Mapping[str, str] | None = None,
        lookups: Mapping[str, Mapping[str, str]] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: Organization URL (e.g., "https://contoso.crm.dynamics.com").
            api_version: Web API version segment.
            access_token: OAuth bearer token.
            timeout: HTTP request timeout in seconds.
            entity_sets: Overrides for entity set names.
            lookups: Overrides for lookup attribute definitions.
        """
        self._api_url = f"{base_url.rstrip('/')}/api/data/{api_version}"
        self._access_token = access_token
        self._timeout = timeout
        self._entity_sets = DEFAULT_ENTITY_SETS | dict(entity_sets or {})
        self._lookups = {k: dict(v) for k, v in (lookups or DEFAULT_LOOKUPS).items()}
        self._logger = structlog.get_logger("dataverse_api")

    # -------------------------------------------------------------------------
    # RecordStoreProtocol
    # -------------------------------------------------------------------------

    async def retrieve(
        self, entity_name: str, record_id: UUID, columns: Sequence[str]
    ) -> Record:
        response = await self._execute_request(
            method="GET",
            url=f"{self._api_url}/{self._entity_set(entity_name)}({record_id})",
            params={"$select": self._select(entity_name, columns)},
            operation="retrieve",
            entity_name=entity_name,
        )
        data = self._parse_json_object(response, "retrieve", entity_name)
        return self._to_record(entity_name, data, columns, fallback_id=record_id)

    async def query(self, query: QueryExpression) -> list[Record]:
        entity_name = query.entity_name
        select_params = {"$select": self._select(entity_name, query.columns)}
        odata_filter = self._filter(entity_name, query.criteria.conditions)
        if odata_filter:
            select_params["$filter"] = odata_filter
        params: dict[str, str] | None = select_params

        url = f"{self._api_url}/{self._entity_set(entity_name)}"
        records: list[Record] = []

        while url:
            response = await self._execute_request(
                method="GET",
                url=url,
                params=params,
                operation="query",
                entity_name=entity_name,
            )
            data = self._parse_json_object(response, "query", entity_name)
            for item in data.get("value", []):
                records.append(self._to_record(entity_name, item, query.columns))
            # nextLink already carries $select/$filter and the paging cookie
            url = data.get("@odata.nextLink") or ""
            params = None

        self._logger.debug(
            "dataverse_query_succeeded", entity_name=entity_name, count=len(records)
        )
        return records

    async def update(
        self, entity_name: str, record_id: UUID, attributes: Mapping[str, Any]
    ) -> None:
        body = {
            self._write_name(entity_name, name, value): self._write_value(value)
            for name, value in attributes.items()
        }
        response = await self._execute_request(
            method="PATCH",
            url=f"{self._api_url}/{self._entity_set(entity_name)}({record_id})",
            content=_json_body(body),
            extra_headers={"If-Match": "*", "Content-Type": "application/json"},
            operation="update",
            entity_name=entity_name,
        )
        self._check_error_response(response, "update", entity_name)

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "OData-MaxVersion": "4.0",
            "OData-Version": "4.0",
        }
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    async def _execute_request(
        self,
        *,
        method: str,
        url: str,
        operation: str,
        entity_name: str,
        params: dict[str, str] | None = None,
        content: bytes | None = None,
        extra_headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Execute HTTP request, mapping transport errors to RecordStoreError.

        Raises:
            RecordStoreError: On timeout or connection error.
        """
        headers = self._headers() | (extra_headers or {})
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    params=params,
                    content=content,
                )

        except httpx.TimeoutException as e:
            self._logger.warning(
                "dataverse_api_timeout", operation=operation, error=str(e)
            )
            raise RecordStoreError(
                code=ErrorCode.RECORD_STORE_UNAVAILABLE,
                message=f"Dataverse {operation} on {entity_name} timed out",
                operation=operation,
                entity_name=entity_name,
            ) from e

        except httpx.RequestError as e:
            self._logger.warning(
                "dataverse_api_connection_error", operation=operation, error=str(e)
            )
            raise RecordStoreError(
                code=ErrorCode.RECORD_STORE_UNAVAILABLE,
                message=f"Failed to connect to Dataverse: {e}",
                operation=operation,
                entity_name=entity_name,
            ) from e

    def _check_error_response(
        self, response: httpx.Response, operation: str, entity_name: str
    ) -> None:
        """Raise RecordStoreError for any non-2xx response."""
        status = response.status_code
        if 200 <= status < 300:
            return

        detail = _error_message(response)
        self._logger.warning(
            "dataverse_api_error",
            operation=operation,
            entity_name=entity_name,
            status_code=status,
            detail=detail,
        )

        if status == 404:
            code = ErrorCode.RECORD_NOT_FOUND
            message = f"Dataverse {entity_name} not found: {detail}"
        elif status == 429 or status >= 500:
            code = ErrorCode.RECORD_STORE_UNAVAILABLE
            message = f"Dataverse unavailable ({status}): {detail}"
        else:
            code = ErrorCode.RECORD_STORE_REJECTED
            message = f"Dataverse rejected {operation} ({status}): {detail}"

        raise RecordStoreError(
            code=code,
            message=message,
            operation=operation,
            entity_name=entity_name,
            status_code=status,
        )

    def _parse_json_object(
        self, response: httpx.Response, operation: str, entity_name: str
    ) -> dict[str, Any]:
        self._check_error_response(response, operation, entity_name)
        try:
            data = response.json(parse_float=Decimal)
        except ValueError as e:
            self._logger.error(
                "dataverse_api_invalid_json", operation=operation, error=str(e)
            )
            raise RecordStoreError(
                code=ErrorCode.RECORD_MALFORMED,
                message="Invalid JSON response from Dataverse",
                operation=operation,
                entity_name=entity_name,
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise RecordStoreError(
                code=ErrorCode.RECORD_MALFORMED,
                message=f"Expected object response from Dataverse, got {type(data).__name__}",
                operation=operation,
                entity_name=entity_name,
                status_code=response.status_code,
            )
        return data

    # -------------------------------------------------------------------------
    # Name and value translation
    # -------------------------------------------------------------------------

    def _entity_set(self, entity_name: str) -> str:
        return self._entity_sets.get(entity_name, f"{entity_name}s")

    def _lookup_target(self, entity_name: str, attribute: str) -> str | None:
        return self._lookups.get(entity_name, {}).get(attribute)

    def _read_name(self, entity_name: str, attribute: str) -> str:
        if self._lookup_target(entity_name, attribute):
            return f"_{attribute}_value"
        return attribute

    def _write_name(self, entity_name: str, attribute: str, value: Any) -> str:
        if isinstance(value, EntityReference):
            return f"{attribute}@odata.bind"
        return attribute

    def _write_value(self, value: Any) -> Any:
        if isinstance(value, Money):
            return value.amount
        if isinstance(value, EntityReference):
            return f"/{self._entity_set(value.logical_name)}({value.id})"
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, Enum):
            return value.value
        return value

    def _select(self, entity_name: str, columns: Sequence[str]) -> str:
        return ",".join(self._read_name(entity_name, column) for column in columns)

    def _filter(
        self, entity_name: str, conditions: Sequence[ConditionExpression]
    ) -> str:
        return " and ".join(
            f"{self._read_name(entity_name, c.attribute)} {c.operator.value} "
            f"{_odata_literal(c.value)}"
            for c in conditions
        )

    def _to_record(
        self,
        entity_name: str,
        data: Mapping[str, Any],
        columns: Sequence[str],
        *,
        fallback_id: UUID | None = None,
    ) -> Record:
        primary_key = f"{entity_name}id"
        raw_id = data.get(primary_key, fallback_id)
        if raw_id is None:
            raise RecordStoreError(
                code=ErrorCode.RECORD_MALFORMED,
                message=f"Dataverse {entity_name} payload has no '{primary_key}'",
                operation="map",
                entity_name=entity_name,
            )

        attributes: dict[str, Any] = {}
        for column in columns:
            if column == primary_key:
                continue
            property_name = self._read_name(entity_name, column)
            if property_name not in data:
                continue
            value = data[property_name]
            target = self._lookup_target(entity_name, column)
            if target and value is not None:
                value = EntityReference(target, UUID(str(value)))
            attributes[column] = value

        return Record(entity_name, UUID(str(raw_id)), attributes)


def _odata_literal(value: Any) -> str:
    """Render a condition value as an OData literal."""
    value = comparable_value(value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, Decimal, UUID)):
        return str(value)
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


def _error_message(response: httpx.Response) -> str:
    """Extract Dataverse's error message, falling back to the raw body."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:RESPONSE_BODY_MAX_LENGTH]
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return str(payload["error"].get("message", ""))[:RESPONSE_BODY_MAX_LENGTH]
    return response.text[:RESPONSE_BODY_MAX_LENGTH]


def _json_body(body: Mapping[str, Any]) -> bytes:
    """Serialize a PATCH body, writing Decimals as exact JSON numbers.

    json.dumps would need a float for a number literal, and a float keeps
    only about 16 significant digits where a money column holds 19.
    """
    members = (
        f"{json.dumps(name)}:{_json_value(value)}" for name, value in body.items()
    )
    return ("{" + ",".join(members) + "}").encode()


def _json_value(value: Any) -> str:
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Cannot write non-finite amount {value}")
        return format(value, "f")
    return json.dumps(value)
