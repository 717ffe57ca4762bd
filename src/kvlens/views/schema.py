"""Display schema: how arrays, objects and status documents are rendered.

A display schema is a JSON document tagged with ``displaySchema``::

    {
      "displaySchema": "v1",
      "icon": "📦",
      "collectionTitle": "Providers",
      "list": {"titleField": "name", "subtitleField": "description"},
      "detail": {"titleField": "name", "sections": [...]},
      "status": {"titleField": "title", "waitMessage": "Waiting..."}
    }

JSON Schema documents can carry the same settings in ``x-kvlens-*`` vendor
extensions, see :func:`extract_from_json_schema`.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..durations import parse_duration
from ..exceptions import DataLoadError, SchemaError
from .keymodes import KeyMode

logger = logging.getLogger(__name__)

LAYOUT_INLINE = "inline"
LAYOUT_PARAGRAPH = "paragraph"
LAYOUT_TAGS = "tags"
LAYOUT_TABLE = "table"
LAYOUTS = ("", LAYOUT_INLINE, LAYOUT_PARAGRAPH, LAYOUT_TAGS, LAYOUT_TABLE)

DONE_EXIT_AFTER_DELAY = "exit-after-delay"
DONE_WAIT_FOR_KEY = "wait-for-key"
DONE_BEHAVIORS = ("", DONE_EXIT_AFTER_DELAY, DONE_WAIT_FOR_KEY)

ACTION_COPY_VALUE = "copy-value"
ACTION_OPEN_URL = "open-url"
ACTION_TYPES = (ACTION_COPY_VALUE, ACTION_OPEN_URL)

EXTENSION_PREFIX = "x-kvlens-"


@dataclass
class ListConfig:
    title_field: str
    subtitle_field: str = ""
    subtitle_max_lines: int = 1
    badge_fields: List[str] = field(default_factory=list)
    secondary_fields: List[str] = field(default_factory=list)


@dataclass
class DetailSection:
    fields: List[str]
    title: str = ""
    layout: str = ""

    @property
    def effective_layout(self) -> str:
        return self.layout or LAYOUT_TABLE


@dataclass
class DetailConfig:
    title_field: str = ""
    sections: List[DetailSection] = field(default_factory=list)
    hidden_fields: List[str] = field(default_factory=list)


@dataclass
class ActionKeys:
    vim: str = ""
    emacs: str = ""
    function: str = ""

    def for_mode(self, mode: KeyMode) -> str:
        if mode is KeyMode.EMACS:
            return self.emacs
        if mode is KeyMode.FUNCTION:
            return self.function
        return self.vim


@dataclass
class DisplayField:
    label: str
    field: str


@dataclass
class StatusAction:
    label: str
    type: str
    field: str
    keys: ActionKeys = field(default_factory=ActionKeys)


@dataclass
class StatusConfig:
    title_field: str
    message_field: str = ""
    wait_message: str = ""
    success_message: str = ""
    timeout: str = ""
    done_behavior: str = ""
    done_delay: str = ""
    display_fields: List[DisplayField] = field(default_factory=list)
    actions: List[StatusAction] = field(default_factory=list)

    @property
    def waits_for_key(self) -> bool:
        return self.done_behavior == DONE_WAIT_FOR_KEY

    @property
    def timeout_seconds(self) -> Optional[float]:
        """Deadline in seconds, or None when no positive timeout is set."""
        return _duration_or_none(self.timeout, "timeout")

    @property
    def done_delay_seconds(self) -> Optional[float]:
        return _duration_or_none(self.done_delay, "doneDelay")


@dataclass
class DisplaySchema:
    version: str = "v1"
    icon: str = ""
    collection_title: str = ""
    list: Optional[ListConfig] = None
    detail: Optional[DetailConfig] = None
    status: Optional[StatusConfig] = None

    @property
    def heading(self) -> str:
        return f"{self.icon} {self.collection_title}".strip()


def _duration_or_none(value: str, name: str) -> Optional[float]:
    if not value:
        return None
    try:
        seconds = parse_duration(value)
    except ValueError:
        logger.warning("Ignoring invalid %s duration %r", name, value)
        return None
    if seconds <= 0:
        return None
    return seconds


def _string(data: Mapping, key: str, where: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SchemaError(f"expected a string, got {type(value).__name__}", f"{where}.{key}")
    return value


def _string_list(data: Mapping, key: str, where: str) -> List[str]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SchemaError("expected a list of strings", f"{where}.{key}")
    return list(value)


def _object(value: Any, where: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise SchemaError("expected an object", where)
    return value


def _check_duration(value: str, where: str) -> None:
    if not value:
        return
    try:
        parse_duration(value)
    except ValueError as e:
        raise SchemaError(str(e), where)


def _parse_list(data: Mapping) -> ListConfig:
    where = "list"
    title_field = _string(data, "titleField", where)
    if not title_field:
        raise SchemaError("titleField is required", "list.titleField")
    max_lines = data.get("subtitleMaxLines", 1) or 1
    if not isinstance(max_lines, int) or max_lines < 1:
        raise SchemaError("expected a positive integer", "list.subtitleMaxLines")
    return ListConfig(
        title_field=title_field,
        subtitle_field=_string(data, "subtitleField", where),
        subtitle_max_lines=max_lines,
        badge_fields=_string_list(data, "badgeFields", where),
        secondary_fields=_string_list(data, "secondaryFields", where),
    )


def _parse_detail(data: Mapping) -> DetailConfig:
    sections = []
    for i, raw in enumerate(data.get("sections") or []):
        where = f"detail.sections[{i}]"
        section = _object(raw, where)
        fields = _string_list(section, "fields", where)
        if not fields:
            raise SchemaError("fields must not be empty", f"{where}.fields")
        layout = _string(section, "layout", where)
        if layout not in LAYOUTS:
            raise SchemaError(
                f"layout must be one of {', '.join(l for l in LAYOUTS if l)}", f"{where}.layout"
            )
        sections.append(DetailSection(fields=fields, title=_string(section, "title", where), layout=layout))
    return DetailConfig(
        title_field=_string(data, "titleField", "detail"),
        sections=sections,
        hidden_fields=_string_list(data, "hiddenFields", "detail"),
    )


def _parse_status(data: Mapping) -> StatusConfig:
    where = "status"
    config = StatusConfig(
        title_field=_string(data, "titleField", where),
        message_field=_string(data, "messageField", where),
        wait_message=_string(data, "waitMessage", where),
        success_message=_string(data, "successMessage", where),
        timeout=_string(data, "timeout", where),
        done_behavior=_string(data, "doneBehavior", where),
        done_delay=_string(data, "doneDelay", where),
    )
    if config.done_behavior not in DONE_BEHAVIORS:
        raise SchemaError(
            f"doneBehavior must be {DONE_EXIT_AFTER_DELAY} or {DONE_WAIT_FOR_KEY}",
            "status.doneBehavior",
        )
    _check_duration(config.timeout, "status.timeout")
    _check_duration(config.done_delay, "status.doneDelay")

    for i, raw in enumerate(data.get("displayFields") or []):
        item = _object(raw, f"status.displayFields[{i}]")
        config.display_fields.append(
            DisplayField(
                label=_string(item, "label", "status.displayFields"),
                field=_string(item, "field", "status.displayFields"),
            )
        )

    for i, raw in enumerate(data.get("actions") or []):
        where = f"status.actions[{i}]"
        item = _object(raw, where)
        action_type = _string(item, "type", where)
        if action_type not in ACTION_TYPES:
            raise SchemaError(f"type must be one of {', '.join(ACTION_TYPES)}", f"{where}.type")
        keys = _object(item.get("keys") or {}, f"{where}.keys")
        config.actions.append(
            StatusAction(
                label=_string(item, "label", where),
                type=action_type,
                field=_string(item, "field", where),
                keys=ActionKeys(
                    vim=_string(keys, "vim", where),
                    emacs=_string(keys, "emacs", where),
                    function=_string(keys, "function", where),
                ),
            )
        )
    return config


def schema_from_dict(data: Mapping, require_tag: bool = True) -> DisplaySchema:
    """Build and validate a :class:`DisplaySchema` from decoded JSON.

    Raises:
        SchemaError: If the document is not a valid display schema
    """
    data = _object(data, "schema")
    if require_tag and "displaySchema" not in data:
        raise SchemaError("missing displaySchema version tag", "displaySchema")

    schema = DisplaySchema(
        version=str(data.get("displaySchema") or "v1"),
        icon=_string(data, "icon", "schema"),
        collection_title=_string(data, "collectionTitle", "schema"),
    )
    if data.get("list") is not None:
        schema.list = _parse_list(_object(data["list"], "list"))
    if data.get("detail") is not None:
        schema.detail = _parse_detail(_object(data["detail"], "detail"))
    if data.get("status") is not None:
        schema.status = _parse_status(_object(data["status"], "status"))
    return schema


def parse_display_schema(raw: Union[str, bytes, Mapping]) -> DisplaySchema:
    """Parse a display schema from JSON text or an already decoded mapping."""
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise SchemaError(f"invalid JSON: {e}")
    return schema_from_dict(raw)


def extract_from_json_schema(document: Mapping) -> Optional[DisplaySchema]:
    """Collect ``x-kvlens-*`` extensions from a JSON Schema document.

    Array schemas may carry the detail settings on their ``items`` schema.
    Returns None when the document has no extensions.
    """
    found: Dict[str, Any] = {}
    keys = {
        "icon": "icon",
        "collectionTitle": "collectionTitle",
        "list": "list",
        "detail": "detail",
        "status": "status",
    }
    for name, target in keys.items():
        value = document.get(EXTENSION_PREFIX + name)
        if value is not None:
            found[target] = value

    items = document.get("items")
    if isinstance(items, Mapping) and "detail" not in found:
        value = items.get(EXTENSION_PREFIX + "detail")
        if value is not None:
            found["detail"] = value

    if not found:
        return None
    found["displaySchema"] = "v1"
    return schema_from_dict(found)


def load_display_schema(path: Path) -> DisplaySchema:
    """Load a display schema file, accepting either form.

    Raises:
        DataLoadError: If the file cannot be read
        SchemaError: If it is neither a display schema nor an annotated JSON Schema
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DataLoadError(path, str(e))
    try:
        document = json.loads(text)
    except ValueError as e:
        raise SchemaError(f"invalid JSON: {e}")
    document = _object(document, "schema")

    if "displaySchema" in document:
        return schema_from_dict(document)
    schema = extract_from_json_schema(document)
    if schema is None:
        raise SchemaError("no displaySchema tag or x-kvlens-* extensions found")
    return schema
