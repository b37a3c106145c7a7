"""
https://docs.pydantic.dev/latest/concepts/types/#customizing-validation-with-__get_pydantic_core_schema__

Pydantic integration for uuid_utils.UUID, used for booking storage identities.

uuid_utils.UUID is not a stdlib `uuid.UUID`, so pydantic can neither validate nor
serialize it and FastAPI cannot render it in the OpenAPI schema. `UtilsUUID7` adds
both hooks: strings are parsed on input, output is always the canonical string.
"""

from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from uuid_utils import UUID, uuid7


def new_uuid7() -> UUID:
    return uuid7()


class UtilsUUID7(UUID):
    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        def _to_uuid(value: Any) -> UUID:
            if isinstance(value, UUID):
                return value
            try:
                return UUID(str(value))
            except Exception as e:
                raise ValueError(f'Invalid UUID: {value}') from e

        return core_schema.json_or_python_schema(
            # JSON has no UUID type: only strings are accepted
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(_to_uuid),
                ]
            ),
            # Internal code may hand over uuid_utils.UUID, stdlib UUID or str
            python_schema=core_schema.no_info_plain_validator_function(_to_uuid),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str,
                when_used='always',
                return_schema=core_schema.str_schema(),
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        # Bypass handler(schema): the chained validators have no JSON schema form
        return {'type': 'string', 'format': 'uuid'}
