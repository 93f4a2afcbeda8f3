"""Template catalog owned by a provider instance.

Seed templates are module-level tuples of dicts; each provider builds its own
catalog from them at construction, so runtime additions never leak between
provider instances.
"""

import uuid
from typing import Dict, Generic, Iterable, List, Mapping, Type, TypeVar

from notification_dispatch.errors import ErrorCode, NotificationError
from notification_dispatch.models import Template, utc_now

T = TypeVar("T", bound=Template)


class TemplateCatalog(Generic[T]):
    """In-memory template collection keyed by template id.

    Args:
        template_type: Template model used for seeds.
        seeds: Field mappings for the default templates.
    """

    def __init__(self, template_type: Type[T], seeds: Iterable[Mapping] = ()):
        self._template_type = template_type
        self._templates: Dict[str, T] = {}
        for seed in seeds:
            self.add(template_type(**seed))

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def get(self, template_id: str) -> T:
        """Return the stored template.

        Raises:
            NotificationError: TEMPLATE_NOT_FOUND for an unknown id.
        """
        template = self._templates.get(template_id)
        if template is None:
            raise NotificationError(
                ErrorCode.TEMPLATE_NOT_FOUND, f"template not found: {template_id}"
            )
        return template

    def add(self, template: T) -> T:
        """Store a copy of ``template``, assigning an id and timestamps."""
        now = utc_now()
        stored = template.model_copy(
            update={
                "id": template.id or str(uuid.uuid4()),
                "created_at": now,
                "updated_at": now,
            },
            deep=True,
        )
        self._templates[stored.id] = stored
        return stored

    def render(self, template_id: str, data: Mapping[str, str]) -> T:
        return self.get(template_id).render(data)

    def list(self) -> List[T]:
        return list(self._templates.values())


class TemplateProviderMixin:
    """Gives a provider the ``TemplateRenderer`` capability.

    The provider must assign ``self._templates`` a ``TemplateCatalog``.
    """

    _templates: TemplateCatalog

    def get_template(self, template_id: str) -> Template:
        return self._templates.get(template_id)

    def add_template(self, template: Template) -> Template:
        return self._templates.add(template)

    def render_template(self, template_id: str, data: Mapping[str, str]) -> Template:
        """Render a copy of the template; unresolved placeholders stay verbatim."""
        return self._templates.render(template_id, data)

    def list_templates(self) -> List[Template]:
        return self._templates.list()
