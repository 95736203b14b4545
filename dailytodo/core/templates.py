"""Daily note templates for dailytodo."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

logger = logging.getLogger(__name__)

# Variables replaced with the note's date (YYYY-MM-DD)
DATE_VARIABLES = ("{{date}}", "{{today}}")


def read_template(template_path: Path | None) -> str:
    """Read template content.

    Args:
        template_path: Path to the template file, or None if unset.

    Returns:
        Template content, or an empty string if the template is unset,
        missing or unreadable.

    """
    if template_path is None:
        return ""
    if not template_path.is_file():
        logger.debug("Template not found: %s", template_path)
        return ""
    try:
        return template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read template %s: %s", template_path, e)
        return ""


def render_template(content: str, dt: date) -> str:
    """Render template variables.

    Supported variables:
    - {{date}} - ISO date of the note (YYYY-MM-DD)
    - {{today}} - same as {{date}}

    Replacement is literal; there is no escaping.
    """
    result = content
    for var in DATE_VARIABLES:
        result = result.replace(var, dt.isoformat())
    return result


def default_daily_content(dt: date, section_header: str) -> str:
    """Minimal daily note: the date, then an empty todo section."""
    return f"{dt.isoformat()}\n\n{section_header}\n\n"


def create_daily_content(template: str, dt: date, section_header: str) -> str:
    """Build the initial content of a new daily note.

    Falls back to default_daily_content() when the rendered template is blank.
    """
    content = render_template(template, dt)
    if not content.strip():
        return default_daily_content(dt, section_header)
    return content
