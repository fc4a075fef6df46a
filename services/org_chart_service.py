"""Organization chart builder.

Turns the flat list of active team members, each carrying an optional
reports-to reference, into a single rooted tree for the org chart view.
"""

import logging
from collections import defaultdict
from collections.abc import Iterator, Sequence
from typing import Literal

from config.settings import Settings
from models.team import EmployeeRole, TeamType
from schemas.org_chart import DefaultRoot, OrganizationChartNode, OrgEmployee

logger = logging.getLogger(__name__)

OrphanPolicy = Literal["drop", "attach"]

ROOT_ROLE = EmployeeRole.CEO.value

ROLE_LABELS: dict[str, str] = {
    "ceo": "Chief Executive Officer",
    "manager": "Manager",
    "team_lead": "Team Lead",
    "project_manager": "Project Manager",
    "senior_developer": "Senior Developer",
    "developer": "Developer",
    "junior_developer": "Junior Developer",
    "designer": "Designer",
    "qa_engineer": "QA Engineer",
    "business_analyst": "Business Analyst",
    "consultant": "Consultant",
    "contractor": "Contractor",
}


def role_label(role: str) -> str:
    """Return the display title for a role.

    Unknown roles are derived from the enum value, e.g.
    ``"data_scientist"`` becomes ``"Data Scientist"``.
    """
    label = ROLE_LABELS.get(role)
    if label:
        return label
    words = role.replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


class OrgChartBuilder:
    """Builds the organization tree from active team members.

    The builder holds only immutable configuration, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        default_root: DefaultRoot | None = None,
        orphan_policy: OrphanPolicy = "drop",
    ):
        """Initialize the builder.

        Args:
            default_root: Identity of the root to synthesize when no CEO exists.
            orphan_policy: ``"drop"`` leaves members that are not reachable from
                the root out of the tree (they are logged); ``"attach"`` adds
                them as extra top-level children of the root.
        """
        self.default_root = default_root or DefaultRoot()
        self.orphan_policy = orphan_policy

    @classmethod
    def from_settings(cls, settings: Settings) -> "OrgChartBuilder":
        """Create a builder configured from application settings."""
        default_root = DefaultRoot(
            id=settings.org_chart_default_root_id,
            first_name=settings.org_chart_default_root_first_name,
            last_name=settings.org_chart_default_root_last_name,
            title=settings.org_chart_default_root_title,
            email=settings.org_chart_default_root_email,
            team_name=settings.org_chart_default_root_team_name,
        )
        return cls(default_root=default_root, orphan_policy=settings.org_chart_orphan_policy)

    def build_organization_chart(
        self,
        employees: Sequence[OrgEmployee],
    ) -> OrganizationChartNode:
        """Build the organization tree.

        The root is the first CEO in input order. Without one, a default root
        is synthesized and every member with no manager becomes its child.
        Children keep their input order.

        Args:
            employees: Active members of active teams.

        Returns:
            The root node. Never raises for any input, including cyclic
            reports-to chains.
        """
        children_of: dict[str | None, list[OrgEmployee]] = defaultdict(list)
        for employee in employees:
            children_of[employee.reports_to_id].append(employee)

        placed: set[str] = set()
        top = next((e for e in employees if e.role == ROOT_ROLE), None)

        if top is None:
            root = self._default_root_node()
            self._expand(root, None, children_of, placed, on_path=set())
        else:
            root = self._root_node(top)
            placed.add(top.id)
            self._expand(root, top.id, children_of, placed, on_path={top.id})

        orphans = [e for e in employees if e.id not in placed]
        if orphans:
            self._handle_orphans(root, orphans, children_of, placed)

        return root

    def _handle_orphans(
        self,
        root: OrganizationChartNode,
        orphans: list[OrgEmployee],
        children_of: dict[str | None, list[OrgEmployee]],
        placed: set[str],
    ) -> None:
        if self.orphan_policy == "drop":
            logger.warning(
                "Organization chart omits %d member(s) not reachable from root %s: %s",
                len(orphans),
                root.id,
                ", ".join(e.id for e in orphans),
            )
            return

        # Heads (no manager, or a manager missing from the input) go first so
        # their reports nest beneath them; members of unreachable cycles follow.
        known = placed | {e.id for e in orphans}
        heads = [e for e in orphans if e.reports_to_id is None or e.reports_to_id not in known]

        attached = 0
        for orphan in heads + orphans:
            if orphan.id in placed:
                continue
            node = self._node(orphan, level=root.level + 1)
            root.children.append(node)
            placed.add(orphan.id)
            self._expand(node, orphan.id, children_of, placed, on_path={root.id, orphan.id})
            attached += 1

        logger.info(
            "Attached %d orphaned subtree(s) under organization chart root %s",
            attached,
            root.id,
        )

    def _expand(
        self,
        root: OrganizationChartNode,
        parent_id: str | None,
        children_of: dict[str | None, list[OrgEmployee]],
        placed: set[str],
        on_path: set[str],
    ) -> None:
        """Attach all descendants of ``root`` depth-first with an explicit stack.

        ``on_path`` holds the ids between the tree root and the node being
        expanded. A child already on the path closes a cycle and is emitted as
        a leaf flagged with ``cycle``.
        """
        stack: list[tuple[OrganizationChartNode, Iterator[OrgEmployee]]] = [
            (root, iter(children_of.get(parent_id, ())))
        ]
        while stack:
            node, pending = stack[-1]
            employee = next(pending, None)
            if employee is None:
                stack.pop()
                if stack:
                    on_path.discard(node.id)
                continue

            # Already placed by an earlier traversal
            if employee.id in placed and employee.id not in on_path:
                continue

            child = self._node(employee, level=node.level + 1)
            node.children.append(child)
            placed.add(employee.id)

            if employee.id in on_path:
                child.cycle = True
                logger.warning(
                    "Reports-to cycle detected at member %s under %s; branch truncated",
                    employee.id,
                    node.id,
                )
                continue

            on_path.add(employee.id)
            stack.append((child, iter(children_of.get(employee.id, ()))))

    def _node(self, employee: OrgEmployee, level: int) -> OrganizationChartNode:
        return OrganizationChartNode(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            full_name=f"{employee.first_name} {employee.last_name}",
            title=employee.title or role_label(employee.role),
            role=employee.role,
            email=employee.email,
            team_name=employee.team_name or "Unassigned",
            team_type=employee.team_type or TeamType.INTERNAL,
            profile_image_url=employee.profile_image_url or None,
            level=level,
        )

    def _root_node(self, employee: OrgEmployee) -> OrganizationChartNode:
        node = self._node(employee, level=0)
        node.title = employee.title or ROLE_LABELS[ROOT_ROLE]
        node.team_name = employee.team_name or self.default_root.team_name
        return node

    def _default_root_node(self) -> OrganizationChartNode:
        root = self.default_root
        return OrganizationChartNode(
            id=root.id,
            first_name=root.first_name,
            last_name=root.last_name,
            full_name=f"{root.first_name} {root.last_name}",
            title=root.title,
            role=ROOT_ROLE,
            email=root.email,
            team_name=root.team_name,
            team_type=root.team_type,
            level=0,
        )
