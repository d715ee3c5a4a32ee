"""Connection specification resolver.

Turns whatever the caller handed the session store into a ConnectionConfig:

- nothing at all          -> defaults, database "DefaultDB"
- a ConnectionConfig      -> returned unchanged
- a mapping of options    -> validated field by field
- a connection string     -> parsed as [mongodb://][user:pass@]host[:port]/database
"""

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote

from pydantic import ValidationError

from mongostore.config.models.storage import (
    DEFAULT_DATABASE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    ConnectionConfig,
)
from mongostore.db.errors import ConfigurationError

CONNECTION_STRING_PATTERN = re.compile(
    r"^(?:mongodb://)?"
    r"(?:(?P<username>[^:@/]+):(?P<password>[^@/]+)@)?"
    r"(?:(?P<host>[^:@/]*)(?::(?P<port>\d+))?/)?"
    r"(?P<db>.*)$"
)

ConnectionSpec = str | Mapping[str, Any] | ConnectionConfig | None


def parse_connection_string(url: str) -> dict[str, Any]:
    """Split a connection string into option fields.

    Only the parts present in the string are returned, except ``host`` and
    ``port`` which fall back to 127.0.0.1:27017.

    Raises:
        ConfigurationError: If the string has no database segment or a
            port outside 1..65535
    """
    match = CONNECTION_STRING_PATTERN.match(url.strip())
    if match is None:
        raise ConfigurationError(f"Malformed connection string: {_mask(url)}")

    db = match.group("db")
    if not db:
        raise ConfigurationError(f"Connection string has no database name: {_mask(url)}")

    port = int(match.group("port") or DEFAULT_PORT)
    if not 1 <= port <= 65535:
        raise ConfigurationError(f"Port out of range in connection string: {port}")

    fields: dict[str, Any] = {
        "host": match.group("host") or DEFAULT_HOST,
        "port": port,
        "db": db,
    }
    if match.group("username") is not None:
        fields["username"] = unquote(match.group("username"))
        fields["password"] = unquote(match.group("password"))
    return fields


def resolve_connection_config(spec: ConnectionSpec = None) -> ConnectionConfig:
    """Resolve a connection specification into a ConnectionConfig.

    A mapping may carry a ``url`` key; its parsed fields are applied first
    and the other keys in the mapping override them.

    Raises:
        ConfigurationError: If the specification is malformed
    """
    if isinstance(spec, ConnectionConfig):
        return spec

    if spec is None or (isinstance(spec, str) and not spec.strip()):
        return _build({"db": DEFAULT_DATABASE})

    if isinstance(spec, str):
        return _build(parse_connection_string(spec))

    if isinstance(spec, Mapping):
        options = dict(spec)
        url = options.pop("url", None)
        if "database" in options:
            options["db"] = options.pop("database")
        fields = parse_connection_string(url) if url else {}
        fields.update(options)
        return _build(fields)

    raise ConfigurationError(
        f"Unsupported connection specification type: {type(spec).__name__}"
    )


def _build(fields: dict[str, Any]) -> ConnectionConfig:
    try:
        return ConnectionConfig.model_validate(fields)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid connection configuration: {problems}", cause=e) from e


def _mask(url: str) -> str:
    """Hide the password of a connection string for error messages."""
    return re.sub(r"(?<=:)[^:@/]+(?=@)", "***", url)
