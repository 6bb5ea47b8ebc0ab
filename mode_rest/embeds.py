"""Translate requested GraphQL fields into Mode ``embed[...]`` directives.

Each entity kind owns a table of the fields that need something from the
upstream beyond the base resource. Adding a field is a table entry, not a new
branch.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from shared.logger import get_logger

logger = get_logger(__name__)

QUERY_RUN_RESULT_EMBED = "embed[query_runs][result]"


class EntityKind(str, Enum):
    """Top-level resources the facade can fetch."""
    ACCOUNT = "account"
    REPORT = "report"
    REPORT_RUN = "report_run"


@dataclass(frozen=True)
class FieldRule:
    """What a requested field needs from the upstream."""
    embeds: Tuple[str, ...] = ()
    follow_up: bool = False
    follow_up_embeds: Tuple[str, ...] = ()


@dataclass
class EmbedPlan:
    """Directives for the primary call plus relations needing a second call."""
    embeds: List[str] = field(default_factory=list)
    follow_ups: List[str] = field(default_factory=list)
    unmapped: List[str] = field(default_factory=list)

    @property
    def needs_follow_up(self) -> bool:
        return bool(self.follow_ups)


# Fields that arrive with the base resource still get an entry so that they
# are not reported as unmapped relations.
INLINE = FieldRule()

EMBED_RULES: Dict[EntityKind, Dict[str, FieldRule]] = {
    EntityKind.ACCOUNT: {
        "avatar": INLINE,
        "data_sources": FieldRule(embeds=("embed[data_sources][data_sources]",)),
        "preference": FieldRule(embeds=("embed[preference]",)),
        "all_color_palettes": FieldRule(embeds=("embed[all_color_palettes]",)),
    },
    EntityKind.REPORT: {
        "report_theme": FieldRule(embeds=("embed[report_theme]",)),
        "queries": FieldRule(embeds=(
            "embed[queries][queries][query_tables]",
            "embed[queries][queries][charts][charts][color_palette]",
        )),
        "python_notebook": FieldRule(embeds=("embed[python_notebook]",)),
        "python_visualizations": FieldRule(embeds=(
            "embed[python_visualizations][python_visualizations][python_cell]",
            "embed[python_visualizations][python_visualizations][python_cell_run][python_cell_run_results]",
        )),
        "space": FieldRule(embeds=("embed[space]",)),
        "last_run": FieldRule(follow_up=True, follow_up_embeds=(QUERY_RUN_RESULT_EMBED,)),
    },
    EntityKind.REPORT_RUN: {
        "query_runs": FieldRule(embeds=(QUERY_RUN_RESULT_EMBED,)),
    },
}


def rule_for(entity_kind: EntityKind, field_name: str) -> FieldRule:
    """Return the rule registered for a field, or an empty rule."""
    return EMBED_RULES[entity_kind].get(field_name, INLINE)


def map_selection_to_embeds(
    field_names: Iterable[str],
    entity_kind: EntityKind,
    relations: Iterable[str] = (),
) -> EmbedPlan:
    """
    Build the embed plan for the fields requested on one GraphQL node.

    Args:
        field_names: Requested field names, in query order
        entity_kind: Which table to consult
        relations: Names among ``field_names`` that carry a sub-selection

    Returns:
        EmbedPlan with deduplicated directives in scan order, follow-up
        relations, and object-typed fields the table does not know about
    """
    table = EMBED_RULES[entity_kind]
    relation_names = set(relations)
    plan = EmbedPlan()

    for name in field_names:
        rule = table.get(name)
        if rule is None:
            if name in relation_names and name not in plan.unmapped:
                plan.unmapped.append(name)
            continue
        if rule.follow_up:
            if name not in plan.follow_ups:
                plan.follow_ups.append(name)
            continue
        for directive in rule.embeds:
            if directive not in plan.embeds:
                plan.embeds.append(directive)

    if plan.unmapped:
        logger.warning(
            "unmapped_relation",
            entity_kind=entity_kind.value,
            fields=plan.unmapped,
        )

    return plan
