"""
Page templates.

A template is a named list of widgets with fixed geometry. Using one
creates a new page populated with fresh instances (see
LayoutStore.use_template).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from widgetboard.exceptions import TemplateError, TemplateNotFoundError

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATES_FILE = Path(__file__).parent / "builtin" / "templates.yaml"


@dataclass(frozen=True)
class TemplateItem:
    """One widget placement inside a template."""

    widget_type: str
    width: int
    height: int


@dataclass(frozen=True)
class Template:
    """A reusable page layout."""

    template_id: str
    name: str
    description: str = ""
    items: Tuple[TemplateItem, ...] = field(default_factory=tuple)


def _parse_template(raw: Dict) -> Template:
    if not isinstance(raw, dict) or "id" not in raw or "name" not in raw:
        raise TemplateError("Template entry needs an id and a name", entry=raw)

    items = []
    for item in raw.get("items") or []:
        try:
            items.append(
                TemplateItem(
                    widget_type=item["widget"],
                    width=int(item.get("width", 2)),
                    height=int(item.get("height", 2)),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise TemplateError(
                "Invalid template item", template_id=raw["id"], item=item
            ) from e

    return Template(
        template_id=raw["id"],
        name=raw["name"],
        description=raw.get("description", ""),
        items=tuple(items),
    )


def load_templates(path: Optional[Path] = None) -> List[Template]:
    """Load page templates from a YAML file.

    Args:
        path: Template file (defaults to the built-in set)

    Returns:
        Templates in file order

    Raises:
        TemplateError: If the file is malformed
    """
    path = path or BUILTIN_TEMPLATES_FILE
    with open(path) as f:
        data = yaml.safe_load(f)

    if not data or not isinstance(data.get("templates"), list):
        raise TemplateError("Template file has no templates", path=str(path))

    templates = [_parse_template(raw) for raw in data["templates"]]
    logger.debug(f"Loaded {len(templates)} templates from {path}")
    return templates


def get_template(template_id: str, templates: Optional[List[Template]] = None) -> Template:
    """Find a template by id.

    Raises:
        TemplateNotFoundError: If no template has that id
    """
    for template in templates if templates is not None else load_templates():
        if template.template_id == template_id:
            return template
    raise TemplateNotFoundError(template_id=template_id)
