"""GraphQL schema for the Mode facade."""
from typing import Annotated, Optional

import strawberry
from strawberry.extensions import QueryDepthLimiter
from strawberry.schema.config import StrawberryConfig
from strawberry.types import Info

from mode_graphql.resolvers import resolve_account, resolve_report, resolve_report_run
from mode_graphql.selection import selection_from_info
from mode_graphql.types import Account, Report, ReportRun, build
from mode_rest.client import ModeClient


def _client(info: Info) -> ModeClient:
    return info.context["mode_client"]


@strawberry.type
class Query:
    """GraphQL queries."""

    @strawberry.field
    async def account(self, info: Info, name: str) -> Optional[Account]:
        """Get an account by name."""
        shaped = await resolve_account(_client(info), name, selection_from_info(info))
        return build(Account, shaped)

    @strawberry.field
    async def report(self, info: Info, username: str, token: strawberry.ID) -> Optional[Report]:
        """Get a report with its queries, charts and optionally its last run."""
        shaped = await resolve_report(_client(info), username, token, selection_from_info(info))
        return build(Report, shaped)

    @strawberry.field
    async def report_run(
        self,
        info: Info,
        username: str,
        report_token: Annotated[strawberry.ID, strawberry.argument(name="reportToken")],
        run_token: Annotated[strawberry.ID, strawberry.argument(name="runToken")],
    ) -> Optional[ReportRun]:
        """Get one run of a report."""
        shaped = await resolve_report_run(
            _client(info), username, report_token, run_token, selection_from_info(info)
        )
        return build(ReportRun, shaped)


schema = strawberry.Schema(
    query=Query,
    config=StrawberryConfig(auto_camel_case=False),
    extensions=[lambda: QueryDepthLimiter(max_depth=10)],
)
