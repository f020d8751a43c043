"""CRUD managers for collection-type and single-type resources."""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from .networking.client import HttpClient
from .utilities import QueryParams, append_query_params
from .validators import parse_document_response

logger = structlog.get_logger()


class CollectionTypeManager:
    """Documents of a collection type, addressed as ``/<plural_name>[/<document_id>]``."""

    def __init__(self, plural_name: str, http_client: HttpClient) -> None:
        self._plural_name = plural_name
        self._http_client = http_client

        logger.debug("collection_manager_initialized", resource=plural_name)

    @property
    def plural_name(self) -> str:
        return self._plural_name

    def _path(self, document_id: str | None, query_params: QueryParams | None) -> str:
        path = f"/{self._plural_name}"
        if document_id is not None:
            path = f"{path}/{document_id}"
        return append_query_params(path, query_params)

    def find(self, query_params: QueryParams | None = None) -> dict[str, Any]:
        logger.debug("finding_documents", resource=self._plural_name)

        response = self._http_client.request(
            self._path(None, query_params), method="GET"
        )
        document = parse_document_response(response)

        data = document.get("data")
        logger.debug(
            "documents_found",
            resource=self._plural_name,
            count=len(data) if isinstance(data, list) else None,
        )
        return document

    def find_one(
        self, document_id: str, query_params: QueryParams | None = None
    ) -> dict[str, Any]:
        logger.debug(
            "finding_document", resource=self._plural_name, document_id=document_id
        )

        response = self._http_client.request(
            self._path(document_id, query_params), method="GET"
        )
        return parse_document_response(response)

    def create(
        self, data: Mapping[str, Any], query_params: QueryParams | None = None
    ) -> dict[str, Any]:
        logger.debug("creating_document", resource=self._plural_name)

        response = self._http_client.request(
            self._path(None, query_params), method="POST", json={"data": dict(data)}
        )

        logger.debug("document_created", resource=self._plural_name)
        return parse_document_response(response)

    def update(
        self,
        document_id: str,
        data: Mapping[str, Any],
        query_params: QueryParams | None = None,
    ) -> dict[str, Any]:
        logger.debug(
            "updating_document", resource=self._plural_name, document_id=document_id
        )

        response = self._http_client.request(
            self._path(document_id, query_params),
            method="PUT",
            json={"data": dict(data)},
        )

        logger.debug(
            "document_updated", resource=self._plural_name, document_id=document_id
        )
        return parse_document_response(response)

    def delete(self, document_id: str, query_params: QueryParams | None = None) -> None:
        logger.debug(
            "deleting_document", resource=self._plural_name, document_id=document_id
        )

        self._http_client.request(
            self._path(document_id, query_params), method="DELETE"
        )

        logger.debug(
            "document_deleted", resource=self._plural_name, document_id=document_id
        )


class SingleTypeManager:
    """The single document of a single type, addressed as ``/<singular_name>``."""

    def __init__(self, singular_name: str, http_client: HttpClient) -> None:
        self._singular_name = singular_name
        self._http_client = http_client

        logger.debug("single_manager_initialized", resource=singular_name)

    @property
    def singular_name(self) -> str:
        return self._singular_name

    def _path(self, query_params: QueryParams | None) -> str:
        return append_query_params(f"/{self._singular_name}", query_params)

    def find(self, query_params: QueryParams | None = None) -> dict[str, Any]:
        logger.debug("finding_document", resource=self._singular_name)

        response = self._http_client.request(self._path(query_params), method="GET")
        return parse_document_response(response)

    def update(
        self, data: Mapping[str, Any], query_params: QueryParams | None = None
    ) -> dict[str, Any]:
        logger.debug("updating_document", resource=self._singular_name)

        response = self._http_client.request(
            self._path(query_params), method="PUT", json={"data": dict(data)}
        )

        logger.debug("document_updated", resource=self._singular_name)
        return parse_document_response(response)

    def delete(self, query_params: QueryParams | None = None) -> None:
        logger.debug("deleting_document", resource=self._singular_name)

        self._http_client.request(self._path(query_params), method="DELETE")

        logger.debug("document_deleted", resource=self._singular_name)
