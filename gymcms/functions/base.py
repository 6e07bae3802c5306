"""
GymCMS Backend — Function Handler Runtime
===========================================

What:  The transport-neutral request/response pair and the dispatcher every
       function-per-route handler is built from.
Why:   Serverless platforms invoke one handler per URL. The handlers share
       the router's services and schemas; only this thin shell differs.

Dispatch:
    OPTIONS                  → 200, empty body (CORS preflight)
    method without handler   → 405 {"error": "Method not allowed"}
    otherwise                → open a unit of work, run the method handler,
                               commit on success, roll back on failure

Failure mapping:
    GymCMSError              → exc.status_code, {"error", "code"}
    pydantic ValidationError → 400
    anything else            → 500 {"error": "An unexpected error occurred"}

Example:
    handler = function_handler({"GET": list_things, "POST": create_thing})
    response = await handler(FunctionRequest(method="GET"), db)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.database import Database
from gymcms.exceptions import GymCMSError, ValidationError, error_payload
from gymcms.services.auth_service import ADMIN_ROLES, CredentialService, require_role
from gymcms.services.caller import Caller
from gymcms.services.schema_manager import SchemaManager

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": "Accept, Authorization, Content-Type, X-Requested-With",
}


@dataclass
class FunctionRequest:
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    client_ip: Optional[str] = None

    def header(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@dataclass
class FunctionResponse:
    status_code: int = 200
    body: Any = None
    headers: Dict[str, str] = field(default_factory=lambda: dict(CORS_HEADERS))


class FunctionContext:
    """What a method handler gets: the request, a session and caller lookup."""

    def __init__(self, request: FunctionRequest, session: AsyncSession):
        self.request = request
        self.session = session

    async def caller(self, required: bool = False) -> Caller:
        caller = await CredentialService(self.session).resolve_caller(
            self.request.header("Authorization"),
            self.request.client_ip,
            required=required,
        )
        if required:
            require_role(caller.identity, ADMIN_ROLES)
        return caller

    def body_as(self, schema: type) -> BaseModel:
        return schema.model_validate(self.request.body or {})

    def query_int(self, name: str, default: int) -> int:
        raw = self.request.query.get(name)
        if raw in (None, ""):
            return default
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"{name} must be an integer", field=name)
        if value < 0:
            raise ValidationError(f"{name} must not be negative", field=name)
        return value


MethodHandler = Callable[[FunctionContext], Awaitable[FunctionResponse]]
Handler = Callable[[FunctionRequest, Database], Awaitable[FunctionResponse]]


def dump(schema: type, value: Any) -> Any:
    """Serialize an ORM object (or a list of them) through a response schema."""
    if isinstance(value, list):
        return [schema.model_validate(item).model_dump(mode="json") for item in value]
    return schema.model_validate(value).model_dump(mode="json")


async def ensure_ready(db: Database) -> None:
    """Cold start: open the handle and make sure the schema exists."""
    if not db.is_open:
        await db.open()
        await SchemaManager(db).initialize()


def function_handler(methods: Mapping[str, MethodHandler]) -> Handler:
    async def handler(request: FunctionRequest, db: Database) -> FunctionResponse:
        method = request.method.upper()
        if method == "OPTIONS":
            return FunctionResponse(status_code=200)
        if method not in methods:
            return FunctionResponse(status_code=405, body={"error": "Method not allowed"})

        await ensure_ready(db)
        try:
            async with db.session() as session:
                return await methods[method](FunctionContext(request, session))
        except GymCMSError as exc:
            if exc.status_code >= 500:
                logger.error("%s: %s | Context: %s", type(exc).__name__, exc.message, exc.context)
            return FunctionResponse(status_code=exc.status_code, body=error_payload(exc))
        except SchemaValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            return FunctionResponse(
                status_code=400,
                body={"error": f"{location}: {first['msg']}", "code": "validation_error"},
            )
        except Exception:
            logger.exception("Unexpected error in %s handler", method)
            return FunctionResponse(
                status_code=500,
                body={"error": "An unexpected error occurred", "code": "server_error"},
            )

    return handler
