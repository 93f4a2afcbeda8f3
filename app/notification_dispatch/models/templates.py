"""Channel templates.

Templates use literal ``{{name}}`` placeholders. Rendering is plain substring
replacement: there is no conditional or loop syntax, and placeholders without
a value are left in the output untouched.
"""

from datetime import datetime
from typing import ClassVar, Dict, List, Mapping, Tuple

from pydantic import BaseModel, Field, model_validator

from notification_dispatch.models.notification import utc_now


def replace_placeholders(text: str, data: Mapping[str, str]) -> str:
    """Replace each ``{{key}}`` in ``text`` with ``data[key]``."""
    for key, value in data.items():
        text = text.replace("{{" + key + "}}", value)
    return text


class Template(BaseModel):
    """Fields shared by every channel template.

    Subclasses list the content fields that take part in rendering in
    ``RENDERED_FIELDS``.
    """

    RENDERED_FIELDS: ClassVar[Tuple[str, ...]] = ()

    id: str = ""
    name: str = ""
    variables: List[str] = Field(default_factory=list)
    category: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    metadata: Dict[str, str] = Field(default_factory=dict)

    def render(self, data: Mapping[str, str]) -> "Template":
        """Return a rendered copy; the template itself is never modified."""
        updates = {
            name: replace_placeholders(getattr(self, name), data)
            for name in self.RENDERED_FIELDS
        }
        return self.model_copy(update=updates, deep=True)


class EmailTemplate(Template):
    RENDERED_FIELDS: ClassVar[Tuple[str, ...]] = ("subject", "html_body", "text_body")

    subject: str = ""
    html_body: str = ""
    text_body: str = ""


class SMSTemplate(Template):
    """SMS template. ``max_length`` defaults to a single segment."""

    RENDERED_FIELDS: ClassVar[Tuple[str, ...]] = ("message",)

    message: str = ""
    unicode: bool = False
    max_length: int = 0

    @model_validator(mode="after")
    def _default_max_length(self) -> "SMSTemplate":
        if not self.max_length:
            self.max_length = 70 if self.unicode else 160
        return self


class PushAction(BaseModel):
    """Action button shown with a push notification."""

    id: str
    title: str
    icon: str = ""


class PushTemplate(Template):
    RENDERED_FIELDS: ClassVar[Tuple[str, ...]] = ("title", "body")

    platform: str = "all"
    title: str = ""
    body: str = ""
    icon: str = ""
    sound: str = ""
    actions: List[PushAction] = Field(default_factory=list)
