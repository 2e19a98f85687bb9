"""Task taxonomy and productivity classification."""

from dataclasses import dataclass, field
from typing import Optional

from legal_time.core.models import TaskType

PROD_DIRECT_TASKS = (
    "RECORDS",
    "INITIAL",
    "MANUAL",
    "WORK ORDERS",
    "LIVE QUEUE",
    "FEDCRIM",
    "FEDCIV",
)

PROD_INDIRECT_TASKS = (
    "TRAINING BLOCKS",
    "SCHEDULED CALIBRATION SESSION/REFRESHER",
    "CROSS TRAINING",
    "NEW HIRE - TRAINING SUPPORT",
    "LIVE TRAINING QUEUE",
    "CALIBRATION SESSION/REFRESHER",
    "UPSKILLING",
    "SBS",
)

# Quick Action menu plus the one-click buttons (BREAK, LUNCH, BIO, TECH ISSUE)
NON_PRODUCTIVE_TASKS = (
    "EMAIL CHECKING",
    "ENGAGEMENT ACTIVITIES",
    "CLINIC",
    "SITE EVENTS",
    "SKIP LEVEL MEETING",
    "SOFTSKILL TRAINING (L&D)",
    "TECHNICAL ISSUE",
    "MEETING",
    "COACHING",
    "BREAK",
    "LUNCH",
    "BIO",
    "TECH ISSUE",
)

JURISDICTIONS = (
    "FL-Hillsborough",
    "OH-CourtView/NETData",
    "VA-Fairfax",
    "LA-County - Clerk Connect",
    "GA-County - Odyssey Portal",
    "GA-County - CourtInnovations",
    "VA-Statewide",
    "MI-Wayne",
    "CA-County - Odyssey Portal",
    "NV-Clark",
    "CA-San Bernardino",
    "DC-Washington - CourtView",
    "CA-County - Journal Technologies",
    "TN-County - OCRS Prescreened",
    "AL-County & Statewide",
    "GA-County - IronData",
    "IL-Du Page",
    "TX-Lubbock",
    "MI-Macomb",
    "CA-San Diego",
    "LA-St Tammany",
    "MI-St Clair",
    "OH-Lake",
    "CA-Sacramento",
    "LA-Orleans",
    "TX-County - LGS",
    "CA-Stanislaus",
    "CA-Ventura",
    "MI-Ingham",
    "GA-Clayton",
    "TN-County - CourtInnovations",
    "CA-San Francisco",
    "TN-Hamilton",
    "TN-Anderson",
    "GA-County - Odyssey",
    "MN-County - MCRO",
    "FL-County - CiviTek",
    "MI-Kent",
    "TX-County - Odyssey Portal",
    "IL-County - Judici",
    "NC-County & Statewide",
    "IL-Statewide",
    "AR-County - ARCourts",
    "IL-eMagnus",
    "IN-Statewide",
    "OH-Henschen",
    "LA-Rapides",
    "FL-County - eClerk",
    "ND-County & Statewide - Odyssey",
    "OH-Lucas",
    "LA-County - eSearch",
    "IN-County - MyCase",
    "OH-CourtView/Henschen",
    "PA-County",
    "KS-County - Odyssey Portal",
    "HI-County & Statewide",
    "CT-County & Statewide",
    "TX-Dallas",
    "FL-Miami-Dade",
    "CO-County & Statewide",
    "MO-County",
    "TN-Davidson",
    "TN-County - OCRS",
    "OK-County - OSCN",
    "UT-County & Statewide",
    "WA-County",
    "TX-County - Odyssey",
    "FL-County - Benchmark",
    "TX-Statewide",
    "IA-County",
    "OH-CourtView",
    "TN-Shelby",
    "FL-County - ShowCase",
    "OR-County & Statewide - Odyssey",
    "NM-County & Statewide",
    "TX-Harris",
    "IL-County - Odyssey Portal",
    "RI-County & Statewide - Odyssey Portal",
    "AK-County - CourtView",
    "FL-Broward",
    "OH-CourtView/CourtConnection",
    "OH-Cuyahoga",
    "FL-Polk",
    "OH-Hamilton",
    "FL-Leon",
    "NE-County",
    "FL-Manatee",
    "FL-Volusia",
    "IL-McLean",
    "OH-CourtView/Benchmark",
    "MN-Statewide",
    "FL-County - eCaseView",
    "IL-McHenry",
    "SC-County",
    "OH-Benchmark/Henschen",
    "LA-Jefferson",
    "CA-Kern",
    "OH-Lorain",
    "OH-Odyssey Portal/Benchmark",
    "IN-County - Doxpop",
    "TX-Tarrant",
    "FL-Duval",
    "OH-Licking",
    "FL-Sarasota",
    "FL-Seminole",
    "KS-Statewide",
    "FL-Alachua",
    "FL-Brevard",
    "FL-Citrus",
    "NY-Westchester",
    "TN-Blount",
    "GA-County - Benchmark",
    "OH-CourtInnovations/Henschen",
    "TX-County - TexasOnlineRecords",
    "IL-St Clair",
    "IA-*All County*",
    "FL-Monroe",
    "MI-Statewide",
    "NE-Statewide",
    "PA-Statewide",
    "VT-Statewide",
    "WA-Statewide",
)


def normalize_task(task_name: str) -> str:
    """Normalize a task name for lookups (trimmed, upper case)."""
    return task_name.strip().upper()


@dataclass(frozen=True)
class TaskTaxonomy:
    """Static task and jurisdiction lists.

    Attributes:
        prod_direct: Productive-Direct task names, in menu order
        prod_indirect: Productive-Indirect task names, in menu order
        non_productive: Non-productive Quick Action names
        jurisdictions: Selectable jurisdiction labels
    """

    prod_direct: tuple[str, ...] = PROD_DIRECT_TASKS
    prod_indirect: tuple[str, ...] = PROD_INDIRECT_TASKS
    non_productive: tuple[str, ...] = NON_PRODUCTIVE_TASKS
    jurisdictions: tuple[str, ...] = field(default=JURISDICTIONS, repr=False)

    @classmethod
    def from_lists(
        cls,
        prod_direct: Optional[list[str]] = None,
        prod_indirect: Optional[list[str]] = None,
        non_productive: Optional[list[str]] = None,
        jurisdictions: Optional[list[str]] = None,
    ) -> "TaskTaxonomy":
        """Build a taxonomy, falling back to the built-in list for any None."""
        return cls(
            prod_direct=tuple(prod_direct) if prod_direct is not None else PROD_DIRECT_TASKS,
            prod_indirect=(
                tuple(prod_indirect) if prod_indirect is not None else PROD_INDIRECT_TASKS
            ),
            non_productive=(
                tuple(non_productive) if non_productive is not None else NON_PRODUCTIVE_TASKS
            ),
            jurisdictions=tuple(jurisdictions) if jurisdictions is not None else JURISDICTIONS,
        )


DEFAULT_TAXONOMY = TaskTaxonomy()


class TaskClassifier:
    """Map free-text task names onto a TaskType."""

    def __init__(self, taxonomy: Optional[TaskTaxonomy] = None):
        """Initialize classifier.

        Args:
            taxonomy: Task lists to classify against. Defaults to built-in lists.
        """
        self.taxonomy = taxonomy or DEFAULT_TAXONOMY
        self._direct = frozenset(normalize_task(t) for t in self.taxonomy.prod_direct)
        self._indirect = frozenset(normalize_task(t) for t in self.taxonomy.prod_indirect)
        self._non_productive = frozenset(
            normalize_task(t) for t in self.taxonomy.non_productive
        )

    def classify(self, task_name: str) -> TaskType:
        """Classify a task name.

        Prod Direct is checked before Prod Indirect; anything else is
        Uncategorized. Non-Prod is never inferred from text, it is only
        assigned when the task is started as a Quick Action.

        Args:
            task_name: Raw task name

        Returns:
            Matching TaskType
        """
        task = normalize_task(task_name)
        if task in self._direct:
            return TaskType.PROD_DIRECT
        if task in self._indirect:
            return TaskType.PROD_INDIRECT
        return TaskType.UNCATEGORIZED

    def is_non_productive(self, task_name: str) -> bool:
        """Check if a task is on the non-productive Quick Action menu."""
        return normalize_task(task_name) in self._non_productive

    def is_known_jurisdiction(self, name: str) -> bool:
        """Check if a jurisdiction is on the configured list."""
        return name.strip() in self.taxonomy.jurisdictions


_default_classifier = TaskClassifier()


def classify(task_name: str, taxonomy: Optional[TaskTaxonomy] = None) -> TaskType:
    """Classify a task name against the given (or built-in) taxonomy."""
    if taxonomy is None or taxonomy == DEFAULT_TAXONOMY:
        return _default_classifier.classify(task_name)
    return TaskClassifier(taxonomy).classify(task_name)
