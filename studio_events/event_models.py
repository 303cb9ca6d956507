from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Value stored for a field the caller never sent
MISSING_FIELD = "undefined"
# Value stored for a field the caller sent as JSON null
NULL_FIELD = "null"

RECORD_FIELDS = ("studio_id", "user_id", "event", "timestamp")


def render_value(value: Any) -> str:
    """Text form of a JSON value, the way a JavaScript client stringifies it."""
    if value is None:
        return NULL_FIELD
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dict):
        return "[object Object]"
    if isinstance(value, list):
        # Array join renders null members as empty strings
        return ",".join("" if item is None else render_value(item) for item in value)
    return str(value)


class StudioEvent(BaseModel):
    """A studio lifecycle event as posted by a client.

    Field values are taken as sent, any JSON type. Unknown body fields are
    kept and echoed back, but only the four record fields are persisted.
    """

    model_config = ConfigDict(extra="allow")

    studio_id: Any = Field(None, description="Studio identifier")
    user_id: Any = Field(None, description="Acting user")
    event: Any = Field(None, description="Lifecycle event name, e.g. created")
    # Overwritten on write; whatever the caller sends is discarded
    timestamp: Any = Field(None, description="Milliseconds since epoch")

    def field_text(self, name: str) -> str:
        """String form of a record field as it is written to the store."""
        if name not in self.model_fields_set:
            return MISSING_FIELD
        return render_value(getattr(self, name))

    def to_record(self) -> dict[str, str]:
        return {name: self.field_text(name) for name in RECORD_FIELDS}

    def echo(self) -> dict[str, Any]:
        """The fields the caller sent plus the assigned timestamp."""
        data = {
            name: getattr(self, name)
            for name in RECORD_FIELDS
            if name in self.model_fields_set
        }
        data.update(self.model_extra or {})
        return data


class WriteResult(BaseModel):
    id: str
    event: StudioEvent

    def to_response(self) -> dict[str, Any]:
        return {"id": self.id, "event": self.event.echo()}
