"""Notification template loading and rendering.

Each template is a YAML file holding a subject and a body written as
str.format strings, plus a version that is stamped on every request
rendered from it. Files are re-read when they change on disk.
"""

import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Tuple
from logger import get_logger

logger = get_logger()

BUNDLED_TEMPLATES_DIR = Path(__file__).parent

_REQUIRED_KEYS = ("subject_template", "body_template")


@dataclass(frozen=True)
class MessageTemplate:
    """A parsed notification template."""

    name: str
    version: str
    subject_template: str
    body_template: str

    def render(self, variables: Dict[str, Any]) -> Dict[str, str]:
        """Fill in the subject and body.

        Raises:
            KeyError: If the template references a variable not supplied.
        """
        return {
            "subject": self.subject_template.format(**variables).strip(),
            "body": self.body_template.format(**variables).strip() + "\n",
            "version": self.version,
        }


def parse_template(name: str, text: str) -> MessageTemplate:
    """Build a MessageTemplate from YAML text.

    Raises:
        ValueError: If the document is not a mapping or lacks a subject or body.
        yaml.YAMLError: If the YAML is invalid.
    """
    document = yaml.safe_load(text)
    if not isinstance(document, dict):
        raise ValueError(f"Template {name} must be a YAML mapping")

    missing = [key for key in _REQUIRED_KEYS if key not in document]
    if missing:
        raise ValueError(f"Template {name} is missing {', '.join(missing)}")

    return MessageTemplate(
        name=name,
        version=str(document.get("version", "unknown")),
        subject_template=document["subject_template"],
        body_template=document["body_template"],
    )


class TemplateManager:
    """Looks up templates by name in a directory of YAML files.

    Args:
        templates_dir: Directory holding <name>.yaml files; the bundled
            templates by default.
    """

    def __init__(self, templates_dir: Path = BUNDLED_TEMPLATES_DIR):
        self.templates_dir = Path(templates_dir)
        self._parsed: Dict[str, Tuple[int, MessageTemplate]] = {}

    def get(self, name: str) -> MessageTemplate:
        """The current template for a name.

        Raises:
            FileNotFoundError: If there is no such template file.
            ValueError: If the template is malformed.
        """
        path = self.templates_dir / f"{name}.yaml"
        if not path.exists():
            raise FileNotFoundError(f"Template file not found: {path}")

        mtime = path.stat().st_mtime_ns
        cached = self._parsed.get(name)
        if cached is not None and cached[0] == mtime:
            return cached[1]

        logger.debug(f"Loading template {name} from {path}")
        template = parse_template(name, path.read_text(encoding="utf-8"))
        self._parsed[name] = (mtime, template)
        return template

    def render(self, name: str, variables: Dict[str, Any]) -> Dict[str, str]:
        """Render a template by name; see MessageTemplate.render."""
        return self.get(name).render(variables)
