"""
Prompt management.

Holds the two built-in templates (file triage and critical review) and lets
either be replaced by a template file supplied on the command line.
Templates use `str.format` placeholders; literal braces must be doubled.
"""

import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

TRIAGE_TEMPLATE = "triage"
REVIEW_TEMPLATE = "review"


@dataclass(frozen=True)
class PromptTemplate:
    """
    Prompt template structure.

    `variables` lists the placeholders the template text must use and
    `render` must be given.
    """

    name: str
    description: str
    user_prompt_template: str
    variables: tuple[str, ...] = ()
    source: str = "builtin"

    def placeholders(self) -> set[str]:
        """Names of the `{name}` fields used in the template text."""
        try:
            fields = string.Formatter().parse(self.user_prompt_template)
            return {name for _, name, _, _ in fields if name is not None}
        except ValueError as e:
            raise ValueError(
                f"Template '{self.name}' ({self.source}) is malformed: {e}"
            ) from e

    def validate(self) -> None:
        """
        Check the template text against `variables`.

        Raises:
            ValueError: A required placeholder is absent, an unknown one is
                used, or the text is malformed
        """
        used = self.placeholders()
        missing = sorted(set(self.variables) - used)
        if missing:
            raise ValueError(
                f"Template '{self.name}' ({self.source}) does not use "
                f"required placeholder(s): {', '.join(missing)}"
            )
        unknown = sorted(used - set(self.variables))
        if unknown:
            raise ValueError(
                f"Template '{self.name}' ({self.source}) uses unknown "
                f"placeholder(s): {', '.join(unknown)}"
            )

    def render(self, **kwargs: Any) -> str:
        """
        Render the template into a single user prompt.

        Raises:
            ValueError: A placeholder is missing or the template is malformed
        """
        missing = [name for name in self.variables if name not in kwargs]
        if missing:
            raise ValueError(f"Missing template variable(s): {', '.join(missing)}")

        try:
            return self.user_prompt_template.format(**kwargs)
        except (KeyError, IndexError) as e:
            raise ValueError(
                f"Template '{self.name}' ({self.source}) uses unknown placeholder {e}"
            ) from e
        except ValueError as e:
            raise ValueError(
                f"Template '{self.name}' ({self.source}) is malformed: {e}"
            ) from e


DEFAULT_TEMPLATES: dict[str, PromptTemplate] = {
    TRIAGE_TEMPLATE: PromptTemplate(
        name=TRIAGE_TEMPLATE,
        description="Select the changed files that need a full review",
        user_prompt_template="""You are triaging a code change before a detailed review.

Below is the commit metadata and the unified diff, followed by the list of
files touched by the change.

{commit_info}

Changed files:
{changed_files}

Pick the files whose full contents a reviewer needs in order to judge this
change: the files that were modified in a non-trivial way and the files they
depend on that are needed for context. Ignore lock files, generated files and
binary assets.

Respond with ONLY a JSON array of file paths relative to the repository root,
for example: ["src/app.py", "README.md"]. Do not add any explanation.
""",
        variables=("commit_info", "changed_files"),
    ),
    REVIEW_TEMPLATE: PromptTemplate(
        name=REVIEW_TEMPLATE,
        description="Critical review of the change",
        user_prompt_template="""You are a senior engineer doing a critical code review.

{commit_info}

Full contents of the relevant files at this commit:
{file_contents}

Review the change critically. Point out bugs, regressions, security problems,
missing error handling, unclear naming and missing tests. Reference files and
lines where possible, be concise, and say so plainly if the change looks good.
""",
        variables=("commit_info", "file_contents"),
    ),
}


@dataclass
class PromptManager:
    """Registry of prompt templates keyed by name."""

    templates: dict[str, PromptTemplate] = field(
        default_factory=lambda: dict(DEFAULT_TEMPLATES)
    )

    def get_template(self, name: str) -> PromptTemplate:
        """Return the template called `name`."""
        try:
            return self.templates[name]
        except KeyError as e:
            raise ValueError(f"Unknown prompt template: {name}") from e

    def override_from_file(self, name: str, path: str | Path) -> PromptTemplate:
        """
        Replace template `name` with the contents of `path`.

        The built-in template's placeholder list is kept, and the override is
        rejected unless it uses exactly those placeholders.

        Raises:
            OSError: The file cannot be read
            ValueError: `name` is not a known template or the file does not
                use the expected placeholders
        """
        base = self.get_template(name)
        text = Path(path).read_text(encoding="utf-8")
        template = PromptTemplate(
            name=name,
            description=base.description,
            user_prompt_template=text,
            variables=base.variables,
            source=str(path),
        )
        template.validate()
        self.templates[name] = template
        logger.info(f"Using custom {name} prompt from {path}")
        return template
