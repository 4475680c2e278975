"""
Resolution of narrative story fields that may live in several schema locations.
"""
import logging
from typing import Optional

from story_reader.models.jira import Story, StoryFields

logger = logging.getLogger(__name__)


# Control characters and space only; U+00A0 and other Unicode spaces are content
TRIM_CHARS = "".join(chr(code) for code in range(0x21))


def _non_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = value.strip(TRIM_CHARS)
    return trimmed or None


class StoryFieldResolver:
    """Extracts summary, description and acceptance criteria from decoded stories."""

    @staticmethod
    def resolve_acceptance_criteria(fields: Optional[StoryFields]) -> Optional[str]:
        """
        Return the first non-blank acceptance criteria candidate.

        Tenants map "Acceptance Criteria" to different custom fields, so the
        candidates are probed in a fixed order: customfield_10014, 10015,
        10016, 10017, 10018. Existing tenant data depends on this order.

        Args:
            fields: Story fields, may be None

        Returns:
            Trimmed acceptance criteria, or None when every candidate is null or blank
        """
        if fields is None:
            return None
        for candidate in fields.acceptance_criteria_candidates():
            value = _non_blank(candidate)
            if value is not None:
                return value
        return None

    @staticmethod
    def resolve_description(story: Optional[Story]) -> Optional[str]:
        """Trimmed description, or None if missing or blank."""
        if story is None or story.fields is None:
            return None
        return _non_blank(story.fields.description)

    @staticmethod
    def resolve_summary(story: Optional[Story]) -> Optional[str]:
        """Trimmed summary, or None if missing or blank."""
        if story is None or story.fields is None:
            return None
        return _non_blank(story.fields.summary)

    @classmethod
    def resolve_story_acceptance_criteria(cls, story: Optional[Story]) -> Optional[str]:
        """Acceptance criteria for a whole story; logs a warning when there is none."""
        if story is None:
            return None
        value = cls.resolve_acceptance_criteria(story.fields)
        if value is None:
            logger.warning(f"No acceptance criteria found for story: {story.key}")
        return value
