"""Shared machinery for MCP tool sets.

A ``ToolSet`` groups the tools of one entity. Each tool is an async method
decorated with ``tool_envelope`` and listed in ``specs()``; ``register``
adds the bound methods to a ``FastMCP`` server under
``paperless.<namespace>.<action>``.

Tool methods raise ``ToolError`` for every expected failure.
``tool_envelope`` turns those into a failure envelope and any other
exception into ``UNKNOWN``, so a tool call always returns one JSON string.

Annotations in tool modules are evaluated eagerly (no postponed
annotations) because FastMCP builds each tool's input schema from them.
"""

import functools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable, TypeVar

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from paperless_mcp.integration.paperless_client import PaperlessClient
from paperless_mcp.integration.result import ApiResult, Failure
from paperless_mcp.middleware.error_handler import ToolError, ValidationError, error_from_api
from paperless_mcp.models.common import PaginatedResult
from paperless_mcp.models.responses import ErrorCode, Meta, ToolErrorResponse, ToolResponse
from paperless_mcp.services.confirmation import require_confirmation, run_bulk_operation
from paperless_mcp.validators.params import require_int_list

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

READ_ONLY = ToolAnnotations(
    readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True
)
WRITE = ToolAnnotations(
    readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=True
)
IDEMPOTENT_WRITE = ToolAnnotations(
    readOnlyHint=False, destructiveHint=False, idempotentHint=True, openWorldHint=True
)
DESTRUCTIVE = ToolAnnotations(
    readOnlyHint=False, destructiveHint=True, idempotentHint=False, openWorldHint=True
)

# Reusable parameter annotations
EntityId = Annotated[int, Field(description="Object ID")]
Page = Annotated[int, Field(description="Page number (default: 1)")]
PageSize = Annotated[int, Field(description="Page size (default: 25, capped at MAX_PAGE_SIZE)")]
Ordering = Annotated[
    str | None, Field(description="Ordering field, prefix with '-' for descending (e.g. 'name')")
]
Confirm = Annotated[bool, Field(description="Must be true to execute")]
DryRun = Annotated[
    bool, Field(description="Dry run mode: report what would change without applying")
]
MatchPattern = Annotated[str | None, Field(description="Match pattern for auto-assignment")]
MatchingAlgorithmParam = Annotated[
    int | None,
    Field(
        ge=0,
        le=6,
        description="Matching algorithm (0=None, 1=Any, 2=All, 3=Literal, 4=Regex, 5=Fuzzy, 6=Auto)",
    ),
]
IsInsensitive = Annotated[bool | None, Field(description="Case-insensitive matching")]


@dataclass(frozen=True)
class ToolSpec:
    """One tool exposed by a ``ToolSet``."""

    action: str
    method: str
    description: str
    annotations: ToolAnnotations


def tool_envelope(func: Callable[..., Awaitable[str]]) -> Callable[..., Awaitable[str]]:
    """Convert raised errors into a failure envelope."""

    @functools.wraps(func)
    async def wrapper(self, *args: Any, **kwargs: Any) -> str:
        try:
            return await func(self, *args, **kwargs)
        except ToolError as exc:
            logger.info(
                "Tool %s returned %s: %s",
                func.__name__,
                exc.code.value,
                exc.message,
                extra={"tool": func.__name__},
            )
            return exc.to_response(self.meta()).to_json()
        except Exception as exc:
            logger.exception(
                "Tool %s failed unexpectedly", func.__name__, extra={"tool": func.__name__}
            )
            return ToolErrorResponse.failure(
                ErrorCode.UNKNOWN,
                f"Unexpected error: {exc}",
                {"type": type(exc).__name__},
                self.meta(),
            ).to_json()

    return wrapper


def build_request(model: type[M], **fields: Any) -> M:
    """Instantiate a request model from the parameters actually provided."""
    try:
        return model(**{key: value for key, value in fields.items() if value is not None})
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid parameters",
            {"errors": exc.errors(include_url=False, include_context=False)},
        ) from None


class ToolSet(ABC):
    """Base class for a group of tools sharing one ``PaperlessClient``.

    Parameters
    ----------
    client:
        Client for the configured Paperless instance.
    """

    namespace: str = ""

    def __init__(self, client: PaperlessClient) -> None:
        self.client = client

    @abstractmethod
    def specs(self) -> list[ToolSpec]:
        """Tools this set registers, in registration order."""

    def tool_name(self, action: str) -> str:
        if self.namespace:
            return f"paperless.{self.namespace}.{action}"
        return f"paperless.{action}"

    def register(self, mcp: FastMCP) -> list[str]:
        """Add every tool of this set to ``mcp`` and return their names."""
        names = []
        for spec in self.specs():
            name = self.tool_name(spec.action)
            mcp.add_tool(
                getattr(self, spec.method),
                name=name,
                description=spec.description,
                annotations=spec.annotations,
            )
            names.append(name)
        return names

    # -- envelope helpers ---------------------------------------------------

    def meta(self, **pagination: Any) -> Meta:
        return Meta(paperless_base_url=self.client.base_url, **pagination)

    def ok(self, result: Any, warnings: list[str] | None = None) -> str:
        return ToolResponse.success(result, self.meta(), warnings).to_json()

    def ok_page(self, page: PaginatedResult[Any], number: int, size: int, items: Any = None) -> str:
        meta = self.meta(page=number, page_size=size, total=page.count, next=page.next)
        return ToolResponse.success(page.results if items is None else items, meta).to_json()

    @staticmethod
    def unwrap(
        result: ApiResult[T], message: str | None = None, not_found: str | None = None
    ) -> T:
        """Value of a ``Success``; a ``Failure`` is raised as a taxonomy error.

        ``not_found`` replaces the message when the backend answered 404.
        """
        if isinstance(result, Failure):
            if not_found and result.error.status_code == 404:
                raise error_from_api(result.error, not_found)
            raise error_from_api(result.error, message and f"{message}: {result.error}")
        return result.value


class MetadataToolSet(ToolSet):
    """list/get/delete/bulk_delete for one metadata entity.

    Subclasses set the class attributes and add their own ``create`` and
    ``update`` tools, whose parameters differ per entity.
    """

    label: str = ""
    model: type[BaseModel] = BaseModel
    object_type: str | None = None
    preview_fields: tuple[str, ...] = ("name", "document_count")

    def specs(self) -> list[ToolSpec]:
        plural = self.namespace.replace("_", " ")
        specs = [
            ToolSpec("list", "list_entities", f"List all {plural} with pagination.", READ_ONLY),
            ToolSpec("get", "get_entity", f"Get a {self.label.lower()} by its ID.", READ_ONLY),
            ToolSpec("create", "create", f"Create a new {self.label.lower()}.", WRITE),
            ToolSpec("update", "update", f"Update an existing {self.label.lower()}.", IDEMPOTENT_WRITE),
            ToolSpec(
                "delete",
                "delete_entity",
                f"Delete a {self.label.lower()}. Requires explicit confirmation.",
                DESTRUCTIVE,
            ),
        ]
        if self.object_type:
            specs.append(
                ToolSpec(
                    "bulk_delete",
                    "bulk_delete",
                    f"Delete multiple {plural}. Supports dry run mode.",
                    DESTRUCTIVE,
                )
            )
        return specs

    def not_found(self, entity_id: int) -> str:
        return f"{self.label} with ID {entity_id} not found"

    def preview(self, entity: BaseModel) -> dict[str, Any]:
        data = {"id": getattr(entity, "id")}
        for name in self.preview_fields:
            data[name] = getattr(entity, name, None)
        return data

    async def _get(self, entity_id: int) -> Any:
        result = await self.client.get_entity(self.namespace, entity_id, self.model)
        return self.unwrap(result, not_found=self.not_found(entity_id))

    @tool_envelope
    async def list_entities(
        self, page: Page = 1, page_size: PageSize = 25, ordering: Ordering = None
    ) -> str:
        size = self.client.clamp_page_size(page_size)
        result = await self.client.list_entities(
            self.namespace, self.model, page=page, page_size=size, ordering=ordering
        )
        return self.ok_page(self.unwrap(result), page, size)

    @tool_envelope
    async def get_entity(self, id: EntityId) -> str:
        return self.ok(await self._get(id))

    async def _create(self, payload: dict[str, Any]) -> str:
        result = await self.client.create_entity(self.namespace, payload, self.model)
        return self.ok(self.unwrap(result, f"Failed to create {self.label.lower()}"))

    async def _update(self, entity_id: int, payload: dict[str, Any]) -> str:
        if not payload:
            raise ValidationError("No fields to update", {"id": entity_id})
        result = await self.client.update_entity(self.namespace, entity_id, payload, self.model)
        return self.ok(
            self.unwrap(
                result,
                f"Failed to update {self.label.lower()}",
                not_found=self.not_found(entity_id),
            )
        )

    @tool_envelope
    async def delete_entity(self, id: EntityId, confirm: Confirm = False) -> str:
        await require_confirmation(
            confirm,
            lambda: self.client.get_entity(self.namespace, id, self.model),
            self.preview,
            not_found_message=self.not_found(id),
        )
        result = await self.client.delete_entity(self.namespace, id)
        self.unwrap(result, f"Failed to delete {self.label.lower()} with ID {id}")
        logger.info("Deleted %s %d", self.label.lower(), id, extra={"tool": self.tool_name("delete")})
        return self.ok({"deleted": True, "id": id})

    @tool_envelope
    async def bulk_delete(
        self,
        ids: Annotated[str, Field(description="IDs to delete (comma-separated)")],
        dry_run: DryRun = True,
        confirm: Confirm = False,
    ) -> str:
        object_ids = require_int_list(ids, "ids")
        outcome = await run_bulk_operation(
            object_ids,
            dry_run=dry_run,
            confirm=confirm,
            execute=lambda chosen: self.client.bulk_edit_objects(chosen, self.object_type),
            failure_message=f"Bulk delete of {self.namespace.replace('_', ' ')} failed",
        )
        return self.ok(outcome)
