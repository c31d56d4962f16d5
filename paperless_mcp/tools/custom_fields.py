"""Custom field tools: paperless.custom_fields.*

Besides CRUD on field definitions, ``assign`` sets a field value on one
document. The value arrives as a string and is converted according to the
field's data type before the document's ``custom_fields`` list is patched.
"""

import logging
from typing import Annotated, Any

from pydantic import Field

from paperless_mcp.middleware.error_handler import ValidationError
from paperless_mcp.models.documents import DocumentCustomField
from paperless_mcp.models.metadata import (
    CustomField,
    CustomFieldCreateRequest,
    CustomFieldDataType,
    CustomFieldExtraData,
    CustomFieldUpdateRequest,
)
from paperless_mcp.tools.base import (
    IDEMPOTENT_WRITE,
    EntityId,
    MetadataToolSet,
    ToolSpec,
    build_request,
    tool_envelope,
)
from paperless_mcp.validators.params import parse_date, parse_int_list

logger = logging.getLogger(__name__)

SelectOptions = Annotated[
    str | None, Field(description="Select options (comma-separated, 'select' type only)")
]
DefaultCurrency = Annotated[
    str | None, Field(description="Default currency code ('monetary' type only, e.g. 'EUR')")
]

_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


def _extra_data(
    select_options: str | None, default_currency: str | None
) -> CustomFieldExtraData | None:
    if select_options:
        options = [option.strip() for option in select_options.split(",") if option.strip()]
        return CustomFieldExtraData(select_options=options)
    if default_currency:
        return CustomFieldExtraData(default_currency=default_currency)
    return None


def parse_field_value(data_type: str, value: str) -> Any:
    """Convert a string value to the JSON type Paperless expects for ``data_type``."""
    text = value.strip()
    try:
        if data_type == CustomFieldDataType.BOOLEAN.value:
            lowered = text.lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError(value)
        if data_type == CustomFieldDataType.INTEGER.value:
            return int(text)
        if data_type == CustomFieldDataType.FLOAT.value:
            return float(text)
    except ValueError:
        raise ValidationError(
            f"Value {value!r} is not a valid {data_type}",
            {"field": "value", "data_type": data_type},
        ) from None

    if data_type == CustomFieldDataType.DATE.value:
        parsed = parse_date(text, "value")
        return parsed.isoformat() if parsed else None
    if data_type == CustomFieldDataType.DOCUMENT_LINK.value:
        return parse_int_list(text) or []
    return value


class CustomFieldTools(MetadataToolSet):
    namespace = "custom_fields"
    label = "Custom field"
    model = CustomField
    preview_fields = ("name", "data_type")

    def specs(self) -> list[ToolSpec]:
        return super().specs() + [
            ToolSpec(
                "assign",
                "assign",
                "Assign a custom field value to a document.",
                IDEMPOTENT_WRITE,
            )
        ]

    @tool_envelope
    async def create(
        self,
        name: Annotated[str, Field(description="Custom field name")],
        data_type: Annotated[
            str,
            Field(
                description="Data type: string, url, date, boolean, integer, float, monetary, documentlink, select"
            ),
        ],
        select_options: SelectOptions = None,
        default_currency: DefaultCurrency = None,
    ) -> str:
        extra = None
        if data_type == CustomFieldDataType.SELECT.value:
            extra = _extra_data(select_options, None)
        elif data_type == CustomFieldDataType.MONETARY.value:
            extra = _extra_data(None, default_currency)
        request = build_request(
            CustomFieldCreateRequest, name=name, data_type=data_type, extra_data=extra
        )
        return await self._create(request.to_payload())

    @tool_envelope
    async def update(
        self,
        id: EntityId,
        name: Annotated[str | None, Field(description="New name")] = None,
        select_options: SelectOptions = None,
        default_currency: DefaultCurrency = None,
    ) -> str:
        request = build_request(
            CustomFieldUpdateRequest,
            name=name,
            extra_data=_extra_data(select_options, default_currency),
        )
        return await self._update(id, request.to_payload())

    @tool_envelope
    async def assign(
        self,
        document_id: Annotated[int, Field(description="Document ID")],
        field_id: Annotated[int, Field(description="Custom field ID")],
        value: Annotated[
            str,
            Field(description="Value to assign (string, number, boolean or date depending on field type)"),
        ],
    ) -> str:
        document = self.unwrap(
            await self.client.get_document(document_id),
            not_found=f"Document with ID {document_id} not found",
        )
        field = await self._get(field_id)
        parsed = parse_field_value(field.data_type, value)

        entry = DocumentCustomField(field=field_id, value=parsed)
        if any(cf.field == field_id for cf in document.custom_fields):
            custom_fields = [entry if cf.field == field_id else cf for cf in document.custom_fields]
        else:
            custom_fields = [*document.custom_fields, entry]
        payload = {"custom_fields": [cf.model_dump(mode="json") for cf in custom_fields]}

        result = await self.client.update_document(document_id, payload)
        self.unwrap(result, "Failed to assign custom field to document")
        logger.info(
            "Assigned custom field %d on document %d",
            field_id,
            document_id,
            extra={"tool": self.tool_name("assign")},
        )
        return self.ok(
            {
                "document_id": document_id,
                "field_id": field_id,
                "field_name": field.name,
                "value": parsed,
                "message": "Custom field assigned successfully",
            }
        )

