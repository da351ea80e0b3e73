"""Parser for composite template identities used by import.

A composite identity has the shape ``id:name:versions``. Only the first two
parts are used; the versions part may be empty.
"""

from templatesync.core.exceptions import InvalidTemplateIdError
from templatesync.domain.entities import ImportedTemplateId


class TemplateIdParser:
    """Split composite template identities."""

    SEPARATOR = ":"
    PART_COUNT = 3

    @classmethod
    def parse(cls, identifier: str) -> ImportedTemplateId:
        """Parse a composite identity.

        Args:
            identifier: Identity string such as ``"abc:welcome:v1"``.

        Returns:
            The template ID and name.

        Raises:
            InvalidTemplateIdError: If the identity has fewer than three parts
                or an empty id or name.

        Examples:
            >>> TemplateIdParser.parse("abc:welcome:v1")
            ImportedTemplateId(template_id='abc', name='welcome')
        """
        parts = identifier.split(cls.SEPARATOR, cls.PART_COUNT - 1)

        if len(parts) != cls.PART_COUNT or not parts[0] or not parts[1]:
            raise InvalidTemplateIdError(identifier)

        return ImportedTemplateId(template_id=parts[0], name=parts[1])


def parse_template_id(identifier: str) -> ImportedTemplateId:
    """Parse a composite ``id:name:versions`` identity."""
    return TemplateIdParser.parse(identifier)
