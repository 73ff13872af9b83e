"""
Tests for actions/sorting.py — default display order.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from actions.schema import Status, validate_actions
from actions.sorting import STATUS_PRIORITY, sort_actions
from conftest import make_record


class TestSortActions:
    def test_status_priority_first(self, sample_actions):
        result = sort_actions(sample_actions)
        assert [a.status for a in result] == [
            Status.READY_TO_START,
            Status.IN_PROGRESS,
            Status.COMPLETED,
            Status.NOT_STARTED,
            Status.ON_HOLD,
        ]

    def test_priority_covers_every_status(self):
        assert set(STATUS_PRIORITY) == set(Status)
        assert sorted(STATUS_PRIORITY.values()) == [1, 2, 3, 4, 5]

    def test_scenario(self, scenario_actions):
        assert [a.id for a in sort_actions(scenario_actions)] == ["2", "1"]

    def test_city_then_name_within_status(self):
        actions = validate_actions([
            make_record(id="a", city="Serra", actionName="Zoning reform"),
            make_record(id="b", city="Recife", actionName="Bike lanes"),
            make_record(id="c", city="Serra", actionName="Bus priority"),
        ])
        assert [a.id for a in sort_actions(actions)] == ["b", "c", "a"]

    def test_accents_do_not_push_city_to_end(self):
        actions = validate_actions([
            make_record(id="a", city="Vitória"),
            make_record(id="b", city="Águas Claras"),
            make_record(id="c", city="Belém"),
        ])
        assert [a.id for a in sort_actions(actions)] == ["b", "c", "a"]

    def test_identical_keys_keep_input_order(self):
        actions = validate_actions([
            make_record(id="first"),
            make_record(id="second"),
        ])
        assert [a.id for a in sort_actions(actions)] == ["first", "second"]

    def test_idempotent(self, sample_actions):
        once = sort_actions(sample_actions)
        assert sort_actions(once) == once

    def test_returns_new_list(self, sample_actions):
        before = list(sample_actions)
        result = sort_actions(sample_actions)
        assert result is not sample_actions
        assert sample_actions == before

    def test_empty(self):
        assert sort_actions([]) == []
