"""GraphQL types mirroring the Mode resources."""
import dataclasses
from typing import Any, Dict, List, Optional, Type, TypeVar

import strawberry
from strawberry.scalars import JSON

T = TypeVar("T")


@strawberry.interface
class Model:
    """Fields every Mode resource carries."""
    id: Optional[int] = None
    token: Optional[strawberry.ID] = None
    links: Optional[JSON] = strawberry.field(name="_links", default=None)
    embedded: Optional[JSON] = strawberry.field(name="_embedded", default=None)


@strawberry.type
class Avatar:
    initials: Optional[str] = None
    color_class: Optional[str] = None
    seed: Optional[str] = None
    type: Optional[str] = None


@strawberry.type
class Preference:
    default_account: Optional[int] = None
    editor_theme: Optional[str] = None
    editor_browser_enabled: Optional[bool] = None
    features: Optional[JSON] = None
    hidden_banners: Optional[JSON] = None
    home_list_type: Optional[str] = None
    home_view: Optional[str] = None
    notebook_sidebar: Optional[JSON] = None


@strawberry.type
class DataSource(Model):
    display_name: Optional[str] = None
    default: Optional[bool] = None
    name: Optional[str] = None
    public: Optional[bool] = None
    queryable: Optional[bool] = None


@strawberry.type
class ColorPalette(Model):
    name: Optional[str] = None
    palette_type: Optional[str] = None
    value: Optional[str] = None


@strawberry.type
class Account(Model):
    name: Optional[str] = None
    user: Optional[bool] = None
    username: Optional[str] = None
    plan_code: Optional[str] = None
    avatar: Optional[Avatar] = None
    data_sources: Optional[List[Optional[DataSource]]] = None
    all_color_palettes: Optional[List[Optional[ColorPalette]]] = None
    preference: Optional[Preference] = None


@strawberry.type
class ReportTheme(Model):
    css_href: Optional[str] = None
    css_source: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None


@strawberry.type
class QueryRunResult(Model):
    content_length: Optional[int] = None
    count: Optional[int] = None
    state: Optional[str] = None
    csv_href: Optional[str] = None
    json_href: Optional[str] = None


@strawberry.type
class QueryRun(Model):
    created_at: Optional[str] = None
    state: Optional[str] = None
    raw_source: Optional[str] = None
    rendered_source: Optional[str] = None
    data_source_id: Optional[int] = None
    limit: Optional[bool] = None
    result: Optional[QueryRunResult] = None


@strawberry.type
class ReportRun(Model):
    created_at: Optional[str] = None
    python_state: Optional[str] = None
    query_runs: Optional[List[Optional[QueryRun]]] = None


@strawberry.type
class Chart(Model):
    color_palette_token: Optional[strawberry.ID] = None
    view: Optional[JSON] = None
    view_vegas: Optional[JSON] = None
    view_version: Optional[int] = None
    color_palette: Optional[ColorPalette] = None


@strawberry.type
class Table(Model):
    view: Optional[JSON] = None


@strawberry.type
class ReportQuery(Model):
    name: Optional[str] = None
    raw_query: Optional[str] = None
    data_source_id: Optional[int] = None
    charts: Optional[List[Optional[Chart]]] = None
    query_tables: Optional[List[Optional[Table]]] = None


@strawberry.type
class Notebook(Model):
    pass


@strawberry.type
class NotebookVisualization(Model):
    pass


@strawberry.type
class Space(Model):
    name: Optional[str] = None
    description: Optional[str] = None
    space_type: Optional[str] = None


@strawberry.type
class Report(Model):
    name: Optional[str] = None
    layout: Optional[str] = None
    description: Optional[str] = None
    last_run_token: Optional[strawberry.ID] = None
    web_preview_image: Optional[str] = None
    full_width: Optional[bool] = None
    created_at: Optional[str] = None
    is_embedded: Optional[bool] = None
    is_signed: Optional[bool] = None
    public: Optional[bool] = None
    report_theme: Optional[ReportTheme] = None
    queries: Optional[List[Optional[ReportQuery]]] = None
    python_notebook: Optional[Notebook] = None
    python_visualizations: Optional[List[Optional[NotebookVisualization]]] = None
    space: Optional[Space] = None
    last_run: Optional[ReportRun] = None


# Object-typed fields per type, used to convert shaped dicts recursively.
NESTED_TYPES: Dict[type, Dict[str, type]] = {
    Account: {
        "avatar": Avatar,
        "data_sources": DataSource,
        "all_color_palettes": ColorPalette,
        "preference": Preference,
    },
    Report: {
        "report_theme": ReportTheme,
        "queries": ReportQuery,
        "python_notebook": Notebook,
        "python_visualizations": NotebookVisualization,
        "space": Space,
        "last_run": ReportRun,
    },
    ReportQuery: {"charts": Chart, "query_tables": Table},
    Chart: {"color_palette": ColorPalette},
    ReportRun: {"query_runs": QueryRun},
    QueryRun: {"result": QueryRunResult},
}


def build(cls: Type[T], data: Optional[Dict[str, Any]]) -> Optional[T]:
    """
    Convert a shaped dict into a GraphQL object.

    Keys are matched on GraphQL field names; unknown keys are dropped and
    nested relations are converted through NESTED_TYPES.
    """
    if data is None:
        return None
    nested = NESTED_TYPES.get(cls, {})
    kwargs = {}
    for f in dataclasses.fields(cls):
        key = getattr(f, "graphql_name", None) or f.name
        if key not in data:
            continue
        value = data[key]
        child = nested.get(key)
        if child is not None and isinstance(value, list):
            value = [build(child, item) for item in value]
        elif child is not None and isinstance(value, dict):
            value = build(child, value)
        kwargs[f.name] = value
    return cls(**kwargs)
