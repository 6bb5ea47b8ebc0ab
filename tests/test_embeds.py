"""Tests for the field-to-embed mapping tables."""
import pytest

from mode_rest.embeds import (
    EMBED_RULES,
    EntityKind,
    QUERY_RUN_RESULT_EMBED,
    map_selection_to_embeds,
    rule_for,
)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("kind", list(EntityKind))
def test_scalar_fields_produce_no_directives(kind):
    plan = map_selection_to_embeds(["id", "token", "name", "_links", "created_at"], kind)
    assert plan.embeds == []
    assert plan.follow_ups == []
    assert plan.unmapped == []


def test_empty_selection():
    plan = map_selection_to_embeds([], EntityKind.REPORT)
    assert plan.embeds == []
    assert not plan.needs_follow_up


# ---------------------------------------------------------------------------
# Relations
# ---------------------------------------------------------------------------

class TestReportRules:
    def test_queries_needs_two_directives_in_order(self):
        plan = map_selection_to_embeds(["name", "queries"], EntityKind.REPORT)
        assert plan.embeds == [
            "embed[queries][queries][query_tables]",
            "embed[queries][queries][charts][charts][color_palette]",
        ]

    def test_directives_follow_field_scan_order(self):
        plan = map_selection_to_embeds(["space", "report_theme", "python_notebook"], EntityKind.REPORT)
        assert plan.embeds == ["embed[space]", "embed[report_theme]", "embed[python_notebook]"]

    def test_python_visualizations(self):
        plan = map_selection_to_embeds(["python_visualizations"], EntityKind.REPORT)
        assert plan.embeds == [
            "embed[python_visualizations][python_visualizations][python_cell]",
            "embed[python_visualizations][python_visualizations][python_cell_run][python_cell_run_results]",
        ]

    def test_last_run_is_a_follow_up_not_a_directive(self):
        plan = map_selection_to_embeds(["last_run", "report_theme"], EntityKind.REPORT)
        assert plan.embeds == ["embed[report_theme]"]
        assert plan.follow_ups == ["last_run"]
        assert plan.needs_follow_up

    def test_last_run_follow_up_embeds(self):
        assert rule_for(EntityKind.REPORT, "last_run").follow_up_embeds == (QUERY_RUN_RESULT_EMBED,)

    def test_duplicate_fields_do_not_repeat_directives(self):
        plan = map_selection_to_embeds(["queries", "queries", "last_run", "last_run"], EntityKind.REPORT)
        assert len(plan.embeds) == 2
        assert plan.follow_ups == ["last_run"]


class TestAccountRules:
    def test_account_relations(self):
        plan = map_selection_to_embeds(
            ["data_sources", "preference", "all_color_palettes"], EntityKind.ACCOUNT
        )
        assert plan.embeds == [
            "embed[data_sources][data_sources]",
            "embed[preference]",
            "embed[all_color_palettes]",
        ]

    def test_avatar_is_inline(self):
        plan = map_selection_to_embeds(["avatar"], EntityKind.ACCOUNT, relations=["avatar"])
        assert plan.embeds == []
        assert plan.unmapped == []


def test_report_run_query_runs():
    plan = map_selection_to_embeds(["query_runs"], EntityKind.REPORT_RUN)
    assert plan.embeds == [QUERY_RUN_RESULT_EMBED]


def test_every_registered_field_maps_to_its_directives():
    for kind, table in EMBED_RULES.items():
        for name, rule in table.items():
            plan = map_selection_to_embeds([name], kind)
            if rule.follow_up:
                assert plan.embeds == [] and plan.follow_ups == [name]
            else:
                assert plan.embeds == list(rule.embeds)


# ---------------------------------------------------------------------------
# Unknown relations
# ---------------------------------------------------------------------------

def test_unknown_relation_is_reported():
    plan = map_selection_to_embeds(["owner", "name"], EntityKind.REPORT, relations=["owner"])
    assert plan.embeds == []
    assert plan.unmapped == ["owner"]


def test_unknown_scalar_is_ignored():
    plan = map_selection_to_embeds(["mystery"], EntityKind.REPORT)
    assert plan.unmapped == []
