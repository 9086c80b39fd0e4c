"""API Gateway proxy integration records.

Both models are plain records, so they work with the record codec like any
other input or output type:

    @lambda_handler(ProxyRequest, ProxyResponse)
    def handler(request: ProxyRequest) -> Outcome[ProxyResponse]:
        return success(ProxyResponse.with_json(200, {"path": request.path}))
"""

import json
from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from typed_lambda.exceptions.base import LambdaAdapterError

_ERROR_STATUS: dict[str, int] = {
    "DECODE_ERROR": HTTPStatus.BAD_REQUEST,
    "TIMEOUT": HTTPStatus.GATEWAY_TIMEOUT,
}


class _ProxyModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ProxyRequest(_ProxyModel):
    """Request delivered by an API Gateway Lambda proxy integration."""

    resource: str | None = None
    path: str = "/"
    http_method: str = "GET"
    headers: dict[str, str] | None = None
    query_string_parameters: dict[str, str] | None = None
    path_parameters: dict[str, str] | None = None
    stage_variables: dict[str, str] | None = None
    request_context: dict[str, Any] | None = None
    body: str | None = None
    is_base64_encoded: bool = False

    def json_body(self) -> Any:
        """Parse the body as JSON, or None when there is no body."""
        if self.body is None:
            return None
        return json.loads(self.body)

    @property
    def request_id(self) -> str | None:
        """API Gateway request ID, when present in the request context."""
        if not self.request_context:
            return None
        request_id = self.request_context.get("requestId")
        return request_id if isinstance(request_id, str) else None


class ProxyResponse(_ProxyModel):
    """Response returned to an API Gateway Lambda proxy integration."""

    status_code: int = Field(default=int(HTTPStatus.OK), ge=100, le=599)
    headers: dict[str, str] = Field(default_factory=dict)
    body: str | None = None
    is_base64_encoded: bool = False

    @classmethod
    def with_json(cls, status_code: int, body: Any) -> "ProxyResponse":
        """Create a response with a JSON body.

        Args:
            status_code: HTTP status code.
            body: JSON-serializable body.

        Returns:
            Proxy response with ``Content-Type: application/json``.
        """
        return cls(
            status_code=status_code,
            headers={"Content-Type": "application/json"},
            body=json.dumps(body),
        )

    @classmethod
    def from_error(
        cls,
        error: LambdaAdapterError,
        *,
        include_context: bool = True,
        request_id: str | None = None,
    ) -> "ProxyResponse":
        """Create an RFC 7807 problem response from an adapter error.

        Args:
            error: The adapter error to convert.
            include_context: Whether to include the error context.
            request_id: Optional request ID for tracing.

        Returns:
            Proxy response with ``Content-Type: application/problem+json``.
        """
        status = _ERROR_STATUS.get(error.error_code, HTTPStatus.INTERNAL_SERVER_ERROR)
        problem: dict[str, Any] = {
            "type": f"about:blank#{error.error_code}",
            "title": error.error_code.replace("_", " ").title(),
            "status": int(status),
            "detail": error.message,
        }
        if request_id:
            problem["instance"] = f"/requests/{request_id}"
        if include_context and error.context:
            problem["context"] = error.context

        return cls(
            status_code=int(status),
            headers={"Content-Type": "application/problem+json"},
            body=json.dumps(problem, default=str),
        )
