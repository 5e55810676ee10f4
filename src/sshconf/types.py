"""Core type definitions for sshconf."""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

LINE_BREAKS = ("\n", "\r")


class ExportFormat(str, Enum):
    """Output dialects for export."""

    NATIVE = "native"
    STRUCTURED = "structured"
    SIMPLIFIED = "simplified"


def normalize_name(name: str) -> str:
    """Strip a host name and check it fits on a single `Host` line."""
    name = name.strip()
    if not name:
        raise ValueError("Host name must not be empty")
    if any(c in name for c in LINE_BREAKS):
        raise ValueError(f"Host name must be a single line: {name!r}")
    return name


def normalize_option(key: str, value: str) -> tuple[str, str]:
    """Check an option parses back as the same `<key> <value>` line."""
    if not key or any(c.isspace() for c in key):
        raise ValueError(f"Invalid option key: {key!r}")
    if key.startswith("#") or key.lower() == "host":
        raise ValueError(f"Invalid option key: {key!r}")

    value = value.strip()
    if not value:
        raise ValueError(f"Option {key} must have a value")
    if any(c in value for c in LINE_BREAKS):
        raise ValueError(f"Option {key} must be a single line: {value!r}")
    return key, value


class HostRecord(BaseModel):
    """A single `Host` block: its name plus options in file order."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    options: dict[str, str] = {}

    @model_validator(mode="before")
    @classmethod
    def fold_flat_options(cls, data):
        # Older dumps store options next to "name" instead of under "options"
        if isinstance(data, dict) and "options" not in data:
            options = {k: v for k, v in data.items() if k != "name"}
            return {"name": data.get("name"), "options": options}
        return data

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return normalize_name(v)

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: dict[str, str]) -> dict[str, str]:
        return dict(normalize_option(key, value) for key, value in v.items())

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.options.get(key, default)


HostCollection = list[HostRecord]


# Recognized field -> SSH option key, in the order new records receive them
FIELD_KEYS = {
    "host": "HostName",
    "user": "User",
    "port": "Port",
    "identity": "IdentityFile",
}


class HostFields(BaseModel):
    """Fields accepted by add/edit. Anything else is ignored."""

    host: str | None = Field(None, validation_alias=AliasChoices("host", "hostname", "HostName"))
    user: str | None = Field(None, validation_alias=AliasChoices("user", "User"))
    port: int | str | None = Field(None, validation_alias=AliasChoices("port", "Port"))
    identity: str | None = Field(
        None, validation_alias=AliasChoices("identity", "identity_file", "IdentityFile")
    )

    def to_options(self) -> dict[str, str]:
        """Return the supplied fields as SSH option key/values."""
        options = {}
        for field, key in FIELD_KEYS.items():
            value = getattr(self, field)
            if value is None or not str(value).strip():
                continue
            options[key] = str(value)
        return options
