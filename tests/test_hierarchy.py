"""Display ordering of parents, children, separator and independents."""

from surgiops.services.hierarchy import SEPARATOR_ID, build_hierarchy, group_children


def _ids(rows):
    return [r["id"] for r in rows]


class TestBuildHierarchy:
    def test_parents_children_separator_independents(self):
        parents = [{"id": 1, "name": "System A"}, {"id": 2, "name": "System B"}]
        children = [
            {"id": 10, "name": "H1", "hospital_system_id": 1},
            {"id": 11, "name": "H2", "hospital_system_id": None},
            {"id": 12, "name": "H3", "hospital_system_id": 2},
            {"id": 13, "name": "H4", "hospital_system_id": 1},
        ]
        rows = build_hierarchy(parents, children, parent_key="hospital_system_id",
                               separator_label="Independent Hospitals")

        assert _ids(rows) == [1, 10, 13, 2, 12, SEPARATOR_ID, 11]
        separator = rows[5]
        assert separator["type"] == "separator"
        assert separator["name"] == "Independent Hospitals"
        assert rows[0]["child_count"] == 2
        assert rows[1]["is_child"] is True
        assert rows[-1]["is_child"] is False

    def test_no_separator_without_parents(self):
        children = [{"id": 10, "team_id": None}, {"id": 11, "team_id": None}]
        rows = build_hierarchy([], children, parent_key="team_id", separator_label="x")
        assert _ids(rows) == [10, 11]

    def test_no_separator_without_independents(self):
        rows = build_hierarchy([{"id": 1}], [{"id": 10, "team_id": 1}],
                               parent_key="team_id", separator_label="x")
        assert SEPARATOR_ID not in _ids(rows)

    def test_orphan_shown_as_independent(self):
        """Child pointing at a parent not in the list (inactive) is independent."""
        rows = build_hierarchy([{"id": 1}], [{"id": 10, "team_id": 99}],
                               parent_key="team_id", separator_label="x")
        assert _ids(rows) == [1, SEPARATOR_ID, 10]

    def test_inputs_not_mutated(self):
        parents = [{"id": 1}]
        children = [{"id": 10, "team_id": 1}]
        build_hierarchy(parents, children, parent_key="team_id", separator_label="x")
        assert parents == [{"id": 1}]
        assert children == [{"id": 10, "team_id": 1}]


def test_group_children_nests_by_parent():
    nested = group_children([{"id": 1}, {"id": 2}], [{"id": 10, "team_id": 2}], parent_key="team_id")
    assert nested[0]["children"] == []
    assert _ids(nested[1]["children"]) == [10]
