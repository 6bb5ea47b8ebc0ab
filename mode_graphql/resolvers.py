"""Resolve top-level queries against the Mode API.

Each resolver maps the requested fields to embed directives, performs the
primary fetch, reshapes the HAL envelope into plain dicts and, when needed,
follows a link for relations Mode does not embed.
"""
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

from mode_graphql.selection import Selection
from mode_rest.client import ModeClient
from mode_rest.embeds import EntityKind, map_selection_to_embeds, rule_for
from mode_rest.envelope import get_embedded_collection, get_embedded_value, get_link_href
from shared.logger import get_logger

logger = get_logger(__name__)

ACCOUNT_TRACKING_SOURCE = "report"

Shaped = Dict[str, Any]


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def shape_chart(chart: Shaped) -> Shaped:
    return {**chart, "color_palette": get_embedded_value(chart, "color_palette")}


def shape_query(query: Shaped) -> Shaped:
    return {
        **query,
        "charts": [shape_chart(chart) for chart in get_embedded_collection(query, "charts")],
        "query_tables": get_embedded_collection(query, "query_tables"),
    }


def shape_query_run(query_run: Shaped) -> Shaped:
    """Lift the result's csv/json links into plain fields."""
    result = get_embedded_value(query_run, "result")
    if result is not None:
        result = {
            **result,
            "csv_href": get_link_href(result, "csv"),
            "json_href": get_link_href(result, "json"),
        }
    return {**query_run, "result": result}


def shape_report_run(run: Shaped) -> Shaped:
    return {
        **run,
        "query_runs": [shape_query_run(qr) for qr in get_embedded_collection(run, "query_runs")],
    }


def shape_account(account: Shaped) -> Shaped:
    return {
        **account,
        "data_sources": get_embedded_collection(account, "data_sources"),
        "all_color_palettes": get_embedded_collection(account, "all_color_palettes"),
        "preference": get_embedded_value(account, "preference"),
    }


def shape_report(report: Shaped) -> Shaped:
    """Normalize every relation of a report; ``last_run`` is filled by a follow-up."""
    return {
        **report,
        "report_theme": get_embedded_value(report, "report_theme"),
        "queries": [shape_query(q) for q in get_embedded_collection(report, "queries")],
        "python_notebook": get_embedded_value(report, "python_notebook"),
        "python_visualizations": get_embedded_collection(report, "python_visualizations"),
        "space": get_embedded_value(report, "space"),
        "last_run": None,
    }


# How to shape the resource behind each follow-up link.
FOLLOW_UP_SHAPERS: Dict[str, Callable[[Shaped], Shaped]] = {
    "last_run": shape_report_run,
}


async def resolve_follow_up(
    client: ModeClient,
    envelope: Shaped,
    relation: str,
    entity_kind: EntityKind,
) -> Optional[Shaped]:
    """
    Fetch a relation reachable only through ``_links``.

    Args:
        client: Mode API client
        envelope: Primary resource holding the link
        relation: Link relation name (e.g. ``last_run``)
        entity_kind: Kind of the primary resource

    Returns:
        Shaped related resource, or None when the link is absent

    Raises:
        UpstreamError: If the follow-up fetch fails
    """
    href = get_link_href(envelope, relation)
    if href is None:
        logger.info("follow_up_link_missing", relation=relation, token=envelope.get("token"))
        return None

    rule = rule_for(entity_kind, relation)
    related = await client.fetch(href, rule.follow_up_embeds)
    return FOLLOW_UP_SHAPERS[relation](related)


async def resolve_account(client: ModeClient, name: str, selection: Selection) -> Shaped:
    """Fetch an account with the embeds its selection needs."""
    plan = map_selection_to_embeds(selection.fields, EntityKind.ACCOUNT, selection.relations)
    envelope = await client.fetch(
        f"/api/{_segment(name)}",
        plan.embeds,
        tracking_source=ACCOUNT_TRACKING_SOURCE,
    )
    logger.info("account_resolved", name=name, embeds=len(plan.embeds))
    return shape_account(envelope)


async def resolve_report(
    client: ModeClient,
    username: str,
    token: str,
    selection: Selection,
) -> Shaped:
    """
    Fetch a report, its embedded relations and any follow-up relations.

    Args:
        client: Mode API client
        username: Account owning the report
        token: Report token
        selection: Fields requested on the report

    Returns:
        Shaped report dict

    Raises:
        UpstreamError: If the primary or a follow-up fetch fails
    """
    plan = map_selection_to_embeds(selection.fields, EntityKind.REPORT, selection.relations)
    envelope = await client.fetch(
        f"/api/{_segment(username)}/reports/{_segment(token)}",
        plan.embeds,
    )
    shaped = shape_report(envelope)

    for relation in plan.follow_ups:
        shaped[relation] = await resolve_follow_up(client, envelope, relation, EntityKind.REPORT)

    logger.info(
        "report_resolved",
        username=username,
        token=token,
        embeds=len(plan.embeds),
        follow_ups=plan.follow_ups,
    )
    return shaped


async def resolve_report_run(
    client: ModeClient,
    username: str,
    report_token: str,
    run_token: str,
    selection: Selection,
) -> Shaped:
    """Fetch a single report run with its query runs."""
    plan = map_selection_to_embeds(selection.fields, EntityKind.REPORT_RUN, selection.relations)
    envelope = await client.fetch(
        f"/api/{_segment(username)}/reports/{_segment(report_token)}/runs/{_segment(run_token)}",
        plan.embeds,
    )
    logger.info("report_run_resolved", report_token=report_token, run_token=run_token)
    return shape_report_run(envelope)
