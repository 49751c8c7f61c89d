"""
System prompt for the country information exchange.

The schema block is rendered from the message classes so the prompt can
never drift from what the decoder accepts.
"""

from typing import Type

from .schema import CountryRequest, CountryResponse, SchemaMessage

SYSTEM_PROMPT_HEADER = """You are a programmatic country information API used by software applications.
All input messages provided MUST adhere to the CountryRequest schema: validate them and throw an error if not.
Your responses MUST adhere to the CountryResponse schema ONLY with no additional narrative or markup, backquotes or anything."""


def render_message_schema(model: Type[SchemaMessage]) -> str:
    """Render a message class in protobuf message syntax."""
    lines = [f"message {model.__name__} {{"]
    for number, (name, proto_type) in enumerate(model.proto_fields(), start=1):
        lines.append(f"  {proto_type} {name} = {number};")
    lines.append("}")
    return "\n".join(lines)


def build_system_prompt() -> str:
    """Build the system instruction sent with every request."""
    schemas = "\n\n".join(
        render_message_schema(model) for model in (CountryRequest, CountryResponse)
    )
    return f"{SYSTEM_PROMPT_HEADER}\n\n{schemas}\n"
