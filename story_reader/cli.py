"""
Interactive console for reading Jira stories.

All user-facing text, input parsing and exit codes live here; the service
only returns stories or raises StoryRetrievalError.
"""
import argparse
import logging
import os
import sys
from typing import Callable, List, Optional

from story_reader.config.settings import load_connection_config
from story_reader.models.jira import JiraServiceError, Story
from story_reader.services.jira.service import StoryReaderService

logger = logging.getLogger(__name__)

MENU_WIDTH = 60
DETAILS_WIDTH = 80

MENU_OPTIONS = [
    "Fetch Single Story by Key",
    "Fetch Multiple Stories by Keys",
    "Search Stories by JQL",
    "Fetch Stories by Project",
    "Fetch Stories by Assignee",
    "Fetch Stories by Sprint",
    "Fetch Stories by Status",
    "Exit",
]


def format_story_details(service: StoryReaderService, story: Optional[Story]) -> str:
    """Render the full detail view of a story."""
    if story is None:
        return "Story is null"

    lines = ["=" * DETAILS_WIDTH, f"STORY: {story.key}", "=" * DETAILS_WIDTH]

    fields = story.fields
    if fields is not None:
        lines.extend([
            f"Summary: {fields.summary or 'N/A'}",
            f"Status: {fields.status.name if fields.status else 'N/A'}",
            f"Priority: {fields.priority.name if fields.priority else 'N/A'}",
            f"Assignee: {fields.assignee.display_name if fields.assignee else 'Unassigned'}",
            f"Reporter: {fields.reporter.display_name if fields.reporter else 'N/A'}",
            f"Story Points: {fields.story_points if fields.story_points is not None else 'N/A'}",
            "",
            "Description:",
            "-" * 40,
            service.get_description(story) or "No description available",
            "",
            "Acceptance Criteria:",
            "-" * 40,
            service.get_acceptance_criteria(story) or "No acceptance criteria available",
        ])

        if fields.labels:
            lines.extend(["", f"Labels: {', '.join(fields.labels)}"])

        if fields.components:
            lines.append(f"Components: {', '.join(c.name or '' for c in fields.components)}")

    lines.append("=" * DETAILS_WIDTH)
    return "\n".join(lines)


def format_story_line(service: StoryReaderService, story: Story) -> str:
    """One-line listing entry for a story."""
    status = story.fields.status.name if story.fields and story.fields.status else "Unknown"
    return f"- {story.key}: {service.get_summary(story) or 'No summary'} [{status}]"


def format_story_list(service: StoryReaderService, stories: List[Story], title: str) -> str:
    """Render a search result listing."""
    if not stories:
        return f"\nFound 0 stories{title}."
    lines = [f"\nFound {len(stories)} stories{title}:"]
    lines.extend(format_story_line(service, story) for story in stories)
    return "\n".join(lines)


class StoryReaderConsole:
    """Numbered-menu console driving a StoryReaderService."""

    def __init__(
        self,
        service: StoryReaderService,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        as_json: bool = False,
    ):
        self.service = service
        self.input = input_func
        self.output = output
        self.as_json = as_json

    def run(self) -> None:
        """Show the menu until the user chooses Exit or input ends."""
        while True:
            self._print_menu()
            try:
                raw_choice = self.input("Enter your choice: ").strip()
            except EOFError:
                return

            try:
                choice = int(raw_choice)
            except ValueError:
                self.output("Please enter a valid number.")
                continue

            if choice == len(MENU_OPTIONS):
                self.output("Goodbye!")
                return

            try:
                self.handle_choice(choice)
            except EOFError:
                return
            except JiraServiceError as e:
                self.output(f"Error: {e}")
                logger.error(f"Error in menu: {e}")

    def handle_choice(self, choice: int) -> None:
        """Dispatch one menu selection."""
        if choice == 1:
            self.fetch_single_story()
        elif choice == 2:
            self.fetch_multiple_stories()
        elif choice == 3:
            self._prompt_search("Enter JQL query (e.g., project = PROJ AND status = 'To Do'): ",
                                "JQL query", self.service.search_stories, "")
        elif choice == 4:
            self._prompt_search("Enter project key (e.g., PROJ): ", "Project key",
                                self.service.get_stories_by_project, " in project {value}")
        elif choice == 5:
            self._prompt_search("Enter assignee (username or email): ", "Assignee",
                                self.service.get_stories_by_assignee, " assigned to {value}")
        elif choice == 6:
            self._prompt_search("Enter sprint name: ", "Sprint name",
                                self.service.get_stories_by_sprint, " in sprint {value}")
        elif choice == 7:
            self._prompt_search("Enter status (e.g., To Do, In Progress, Done): ", "Status",
                                self.service.get_stories_by_status, " with status {value}")
        else:
            self.output("Invalid choice. Please try again.")

    def fetch_single_story(self) -> None:
        story_key = self.input("Enter story key (e.g., PROJ-123): ").strip()
        if not story_key:
            self.output("Story key cannot be empty.")
            return

        story = self.service.get_story_by_key(story_key)
        self._show_story(story)

    def fetch_multiple_stories(self) -> None:
        raw_keys = self.input("Enter story keys separated by commas (e.g., PROJ-123,PROJ-124): ").strip()
        keys = [key.strip() for key in raw_keys.split(",") if key.strip()]
        if not keys:
            self.output("Story keys cannot be empty.")
            return

        stories = self.service.get_stories_by_keys(keys)
        self.output(f"\nFound {len(stories)} stories:")
        for story in stories:
            self._show_story(story)

    def _prompt_search(self, prompt: str, label: str, operation: Callable[[str], List[Story]],
                       title: str) -> None:
        value = self.input(prompt).strip()
        if not value:
            self.output(f"{label} cannot be empty.")
            return

        stories = operation(value)
        if self.as_json:
            for story in stories:
                self.output(self.service.to_json(story))
        else:
            self.output(format_story_list(self.service, stories, title.format(value=value)))

    def _show_story(self, story: Story) -> None:
        if self.as_json:
            self.output(self.service.to_json(story))
        else:
            self.output(format_story_details(self.service, story))

    def _print_menu(self) -> None:
        lines = ["", "=" * MENU_WIDTH, "           JIRA STORY READER", "=" * MENU_WIDTH]
        lines.extend(f"{number}. {label}" for number, label in enumerate(MENU_OPTIONS, start=1))
        lines.append("=" * MENU_WIDTH)
        self.output("\n".join(lines))


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Read Jira stories, descriptions and acceptance criteria.")
    p.add_argument("--config", default=None, help="Path to a jira-config.properties file.")
    p.add_argument("--json", action="store_true", help="Print stories as Jira JSON instead of formatted text.")
    p.add_argument("--log-level", default=os.getenv("STORY_READER_LOG_LEVEL", "INFO"))
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the interactive story reader."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger.info("Starting Jira Story Reader")

    try:
        config = load_connection_config(args.config)
        service = StoryReaderService(config)
    except JiraServiceError as e:
        logger.error(f"Application failed to start: {e}")
        print(f"Failed to start application: {e}", file=sys.stderr)
        return 1

    with service:
        try:
            StoryReaderConsole(service, as_json=args.json).run()
        except KeyboardInterrupt:
            logger.info("Stopped by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
