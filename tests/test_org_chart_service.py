import logging

import pytest

from config.settings import Settings
from models.team import TeamType
from schemas.org_chart import DefaultRoot, OrganizationChartNode, OrgEmployee
from services.org_chart_service import OrgChartBuilder, role_label


def employee(id, role="developer", reports_to_id=None, first_name=None, last_name="Person", **kwargs):
    return OrgEmployee(
        id=id,
        first_name=first_name or f"Emp{id}",
        last_name=last_name,
        role=role,
        reports_to_id=reports_to_id,
        **kwargs,
    )


def ids(nodes):
    return [node.id for node in nodes]


def all_ids(node):
    found = [node.id]
    for child in node.children:
        found.extend(all_ids(child))
    return found


@pytest.fixture
def builder():
    return OrgChartBuilder()


class TestRoleLabel:
    def test_known_roles(self):
        assert role_label("ceo") == "Chief Executive Officer"
        assert role_label("qa_engineer") == "QA Engineer"
        assert role_label("team_lead") == "Team Lead"

    def test_unknown_role_is_derived_from_value(self):
        assert role_label("data_scientist") == "Data Scientist"
        assert role_label("head_of_people_ops") == "Head Of People Ops"

    def test_unknown_single_word_role(self):
        assert role_label("intern") == "Intern"


class TestRootSelection:
    def test_ceo_with_one_report(self, builder):
        employees = [
            employee("1", role="ceo", first_name="Jane", last_name="Doe"),
            employee("2", role="developer", reports_to_id="1", first_name="Sam", last_name="Lee"),
        ]

        root = builder.build_organization_chart(employees)

        assert isinstance(root, OrganizationChartNode)
        assert root.id == "1"
        assert root.full_name == "Jane Doe"
        assert root.level == 0
        assert ids(root.children) == ["2"]
        assert root.children[0].full_name == "Sam Lee"
        assert root.children[0].level == 1

    def test_empty_input_returns_default_root(self, builder):
        root = builder.build_organization_chart([])

        assert root.id == "default-ceo"
        assert root.full_name == "Jason McKee"
        assert root.title == "Chief Executive Officer"
        assert root.role == "ceo"
        assert root.team_name == "Executive"
        assert root.team_type == TeamType.INTERNAL
        assert root.children == []

    def test_default_root_adopts_members_without_manager_in_input_order(self, builder):
        employees = [
            employee("b", first_name="Zed"),
            employee("a", first_name="Amy"),
        ]

        root = builder.build_organization_chart(employees)

        assert root.id == "default-ceo"
        assert ids(root.children) == ["b", "a"]

    def test_first_ceo_wins_and_later_ceo_is_ordinary_node(self, builder):
        employees = [
            employee("1", role="ceo"),
            employee("2", role="ceo", reports_to_id="1"),
            employee("3", reports_to_id="2"),
        ]

        root = builder.build_organization_chart(employees)

        assert root.id == "1"
        assert ids(root.children) == ["2"]
        assert ids(root.children[0].children) == ["3"]

    def test_real_root_display_fallbacks(self, builder):
        root = builder.build_organization_chart([employee("1", role="ceo")])

        assert root.title == "Chief Executive Officer"
        assert root.team_name == "Executive"
        assert root.team_type == TeamType.INTERNAL

    def test_real_root_keeps_own_title_and_team(self, builder):
        ceo = employee("1", role="ceo", title="Founder", team_name="Board", team_type=TeamType.EXTERNAL)

        root = builder.build_organization_chart([ceo])

        assert root.title == "Founder"
        assert root.team_name == "Board"
        assert root.team_type == TeamType.EXTERNAL

    def test_configured_default_root(self):
        builder = OrgChartBuilder(
            default_root=DefaultRoot(id="root", first_name="Ada", last_name="Admin", team_name="Leadership"),
        )

        root = builder.build_organization_chart([])

        assert root.id == "root"
        assert root.full_name == "Ada Admin"
        assert root.team_name == "Leadership"

    def test_from_settings(self):
        settings = Settings(
            database_url="sqlite://",
            openid_config_url="https://login.example.test/config",
            valid_audience="aud",
            valid_issuer="iss",
            org_chart_default_root_id="acme-ceo",
            org_chart_default_root_first_name="Wile",
            org_chart_default_root_last_name="Coyote",
            org_chart_orphan_policy="attach",
        )

        builder = OrgChartBuilder.from_settings(settings)
        root = builder.build_organization_chart([])

        assert builder.orphan_policy == "attach"
        assert root.id == "acme-ceo"
        assert root.full_name == "Wile Coyote"


class TestChildren:
    def test_children_keep_input_order_without_sorting(self, builder):
        employees = [
            employee("ceo", role="ceo"),
            employee("z", reports_to_id="ceo", first_name="Zoe"),
            employee("a", reports_to_id="ceo", first_name="Abe"),
            employee("m", reports_to_id="ceo", first_name="Mia"),
        ]

        root = builder.build_organization_chart(employees)

        assert ids(root.children) == ["z", "a", "m"]

    def test_child_display_fallbacks(self, builder):
        employees = [
            employee("ceo", role="ceo"),
            employee("q", role="qa_engineer", reports_to_id="ceo", title=""),
            employee("n", role="growth_hacker", reports_to_id="ceo"),
        ]

        root = builder.build_organization_chart(employees)
        qa, newcomer = root.children

        assert qa.title == "QA Engineer"
        assert qa.team_name == "Unassigned"
        assert qa.team_type == TeamType.INTERNAL
        assert newcomer.title == "Growth Hacker"
        assert newcomer.role == "growth_hacker"

    def test_child_keeps_own_title_and_team(self, builder):
        employees = [
            employee("ceo", role="ceo"),
            employee(
                "d",
                reports_to_id="ceo",
                title="Senior React Developer",
                team_name="Partners",
                team_type=TeamType.EXTERNAL,
                profile_image_url="https://cdn.example.com/d.png",
            ),
        ]

        child = builder.build_organization_chart(employees).children[0]

        assert child.title == "Senior React Developer"
        assert child.team_name == "Partners"
        assert child.team_type == TeamType.EXTERNAL
        assert child.profile_image_url == "https://cdn.example.com/d.png"

    def test_levels_track_depth(self, builder):
        employees = [
            employee("ceo", role="ceo"),
            employee("m", role="manager", reports_to_id="ceo"),
            employee("l", role="team_lead", reports_to_id="m"),
            employee("d", reports_to_id="l"),
        ]

        root = builder.build_organization_chart(employees)
        manager = root.children[0]
        lead = manager.children[0]
        dev = lead.children[0]

        assert [root.level, manager.level, lead.level, dev.level] == [0, 1, 2, 3]

    def test_every_direct_report_appears_exactly_once(self, builder):
        employees = [employee("ceo", role="ceo")] + [
            employee(str(i), reports_to_id="ceo") for i in range(20)
        ]

        root = builder.build_organization_chart(employees)

        assert sorted(ids(root.children)) == sorted(str(i) for i in range(20))
        assert len(all_ids(root)) == 21

    def test_long_reporting_chain_does_not_hit_recursion_limit(self, builder):
        depth = 3000
        employees = [employee("0", role="ceo")] + [
            employee(str(i), reports_to_id=str(i - 1)) for i in range(1, depth)
        ]

        root = builder.build_organization_chart(employees)

        node = root
        for _ in range(depth - 1):
            assert len(node.children) == 1
            node = node.children[0]
        assert node.id == str(depth - 1)
        assert node.level == depth - 1

    def test_build_is_idempotent(self, builder):
        employees = [
            employee("ceo", role="ceo"),
            employee("m", role="manager", reports_to_id="ceo"),
            employee("d1", reports_to_id="m"),
            employee("d2", reports_to_id="m"),
        ]

        first = builder.build_organization_chart(employees)
        second = builder.build_organization_chart(employees)

        assert first.model_dump() == second.model_dump()


class TestCycles:
    def test_two_member_cycle_unreachable_from_root_terminates(self, builder):
        employees = [
            employee("ceo", role="ceo"),
            employee("a", reports_to_id="b"),
            employee("b", reports_to_id="a"),
        ]

        root = builder.build_organization_chart(employees)

        assert root.id == "ceo"
        assert root.children == []

    def test_cycle_through_root_is_truncated(self, builder, caplog):
        employees = [
            employee("a", role="ceo", reports_to_id="b"),
            employee("b", reports_to_id="a"),
        ]

        with caplog.at_level(logging.WARNING, logger="services.org_chart_service"):
            root = builder.build_organization_chart(employees)

        b = root.children[0]
        looped = b.children[0]
        assert b.id == "b"
        assert looped.id == "a"
        assert looped.cycle is True
        assert looped.children == []
        assert "cycle" in caplog.text

    def test_self_reporting_member(self, builder):
        employees = [
            employee("ceo", role="ceo"),
            employee("s", reports_to_id="ceo"),
            employee("x", reports_to_id="x"),
        ]

        root = builder.build_organization_chart(employees)

        assert ids(root.children) == ["s"]

    def test_cycle_without_ceo_terminates(self, builder):
        employees = [
            employee("top"),
            employee("a", reports_to_id="c"),
            employee("b", reports_to_id="a"),
            employee("c", reports_to_id="b"),
        ]

        root = builder.build_organization_chart(employees)

        assert root.id == "default-ceo"
        assert ids(root.children) == ["top"]
        assert root.children[0].children == []


class TestOrphans:
    def test_drop_policy_keeps_strict_parentage_and_logs(self, builder, caplog):
        employees = [
            employee("ceo", role="ceo"),
            employee("d", reports_to_id="ceo"),
            employee("loner"),
            employee("dangling", reports_to_id="gone"),
        ]

        with caplog.at_level(logging.WARNING, logger="services.org_chart_service"):
            root = builder.build_organization_chart(employees)

        assert ids(root.children) == ["d"]
        assert "loner" in caplog.text
        assert "dangling" in caplog.text

    def test_attach_policy_adds_unreached_subtrees_under_root(self):
        builder = OrgChartBuilder(orphan_policy="attach")
        employees = [
            employee("ceo", role="ceo"),
            employee("d", reports_to_id="ceo"),
            employee("dangling", reports_to_id="gone"),
            employee("report", reports_to_id="dangling"),
            employee("loner"),
        ]

        root = builder.build_organization_chart(employees)

        assert ids(root.children) == ["d", "dangling", "loner"]
        dangling = root.children[1]
        assert ids(dangling.children) == ["report"]
        assert dangling.level == 1
        assert dangling.children[0].level == 2

    def test_attach_policy_with_detached_cycle(self):
        builder = OrgChartBuilder(orphan_policy="attach")
        employees = [
            employee("ceo", role="ceo"),
            employee("a", reports_to_id="b"),
            employee("b", reports_to_id="a"),
        ]

        root = builder.build_organization_chart(employees)

        assert ids(root.children) == ["a"]
        b = root.children[0].children[0]
        assert b.id == "b"
        assert b.children[0].id == "a"
        assert b.children[0].cycle is True

    def test_attach_policy_places_each_member_once(self):
        builder = OrgChartBuilder(orphan_policy="attach")
        employees = [
            employee("ceo", role="ceo"),
            employee("x", reports_to_id="missing"),
            employee("y", reports_to_id="x"),
            employee("z", reports_to_id="y"),
        ]

        root = builder.build_organization_chart(employees)

        assert sorted(all_ids(root)) == ["ceo", "x", "y", "z"]

    def test_attach_policy_child_listed_before_its_manager(self):
        builder = OrgChartBuilder(orphan_policy="attach")
        employees = [
            employee("ceo", role="ceo"),
            employee("y", reports_to_id="x"),
            employee("x", reports_to_id="missing"),
        ]

        root = builder.build_organization_chart(employees)

        assert sorted(all_ids(root)) == ["ceo", "x", "y"]
        assert ids(root.children) == ["x"]
        assert ids(root.children[0].children) == ["y"]
        assert root.children[0].children[0].level == 2

    def test_attach_policy_cycle_with_report_listed_first(self):
        builder = OrgChartBuilder(orphan_policy="attach")
        employees = [
            employee("ceo", role="ceo"),
            employee("c", reports_to_id="b"),
            employee("a", reports_to_id="b"),
            employee("b", reports_to_id="a"),
        ]

        root = builder.build_organization_chart(employees)

        def walk(node):
            for child in node.children:
                yield child
                yield from walk(child)

        regular = [node.id for node in walk(root) if not node.cycle]
        assert sorted(regular) == ["a", "b", "c"]

    def test_dangling_reference_under_synthesized_root(self):
        builder = OrgChartBuilder(orphan_policy="attach")
        employees = [employee("a"), employee("b", reports_to_id="nobody")]

        root = builder.build_organization_chart(employees)

        assert root.id == "default-ceo"
        assert ids(root.children) == ["a", "b"]
