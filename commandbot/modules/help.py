"""
Help menu and version information.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import AppConfig
from .base import FeatureModule


@dataclass(frozen=True)
class HelpRequest:
    """Payload marking a result that should render as the help menu."""


@dataclass(frozen=True)
class VersionRequest:
    """Payload marking a result that should render as version information."""


# Display order and heading for each command category
CATEGORY_HEADINGS = [
    ("weather", "🌍 **Weather**"),
    ("entertainment", "😂 **Entertainment**"),
    ("calculator", "🧮 **Calculator**"),
    ("organizer", "⏰ **Reminders & Notes**"),
    ("utilities", "💱 **Utilities**"),
    ("info", "ℹ️  **More Help**"),
]

HelpEntry = Tuple[str, str, str]  # (category, usage, description)


class HelpModule(FeatureModule):

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()

    @property
    def name(self) -> str:
        return "help"

    def get_help_menu(self, entries: Iterable[HelpEntry]) -> str:
        """Render the help menu from ``(category, usage, description)`` entries."""
        grouped: Dict[str, List[Tuple[str, str]]] = {}
        for category, usage, description in entries:
            grouped.setdefault(category, []).append((usage, description))

        lines = [
            f"🤖 **{self.config.bot_name} - Help Menu**",
            "━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━",
            "",
            "📍 **Available Commands:**",
        ]
        known = [category for category, _ in CATEGORY_HEADINGS]
        headings = CATEGORY_HEADINGS + [
            (category, f"**{category.title()}**") for category in grouped if category not in known
        ]
        for category, heading in headings:
            if category not in grouped:
                continue
            lines.append("")
            lines.append(heading)
            for usage, description in grouped[category]:
                lines.append(f"  • `{usage}` - {description}")
        return "\n".join(lines)

    def get_version_info(self) -> str:
        return "\n".join([
            "🤖 **Bot Information**",
            "━━━━━━━━━━━━━━━━━━━",
            f"Version: {self.config.bot_version}",
            f"Created: {self.config.bot_created}",
            f"Author: {self.config.bot_author}",
            "Status: Active & Running ✅",
        ])
