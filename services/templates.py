"""Service for handling email templates."""

from pathlib import Path
from typing import Any, Dict

from markupsafe import escape

TEMPLATES_DIR = Path(__file__).resolve().parent / "email_templates"


class TemplateService:
    """Loads ``<name>.html`` files and fills ``{{KEY}}`` placeholders."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.templates_dir = Path(templates_dir)

    def load_template(self, template_name: str) -> str:
        """Load email template from file.

        Args:
            template_name (str): The name of the template to load (without extension).

        Raises:
            FileNotFoundError: If the template file is not found.

        Returns:
            str: The content of the email template.
        """
        template_path = self.templates_dir / f"{template_name}.html"

        if not template_path.exists():
            raise FileNotFoundError(f"Template '{template_name}' not found")

        with open(template_path, "r", encoding="utf-8") as file:
            return file.read()

    def render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """Render email template with data.

        Keys are upper-cased, so ``{"first_name": "Ada"}`` fills ``{{FIRST_NAME}}``.
        Values are HTML-escaped; ``None`` renders as an empty string.
        """
        template = self.load_template(template_name)

        for key, value in data.items():
            placeholder = f"{{{{{key.upper()}}}}}"
            template = template.replace(placeholder, "" if value is None else str(escape(value)))

        return template
