from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, cast

from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations

from filederive.cli import derive_files
from filederive.config import Settings, load_settings
from filederive.docs import get_documentation_text
from filederive.generators import describe_generators
from filederive.logging_utils import configure_filederive_logging

logger = logging.getLogger("filederive")


@dataclass
class AppState:
    settings: Settings


@asynccontextmanager
async def app_lifespan(_mcp: FastMCP) -> AsyncIterator[AppState]:
    load_dotenv()
    settings = load_settings()
    log_path = configure_filederive_logging(settings.log_path)
    if log_path is not None:
        logger.info("Using filederive log file: %s", log_path)
    yield AppState(settings=settings)


mcp = FastMCP("filederive-mcp", lifespan=app_lifespan)


def _state(ctx: Context) -> AppState:
    return cast(AppState, ctx.request_context.lifespan_context)


@mcp.tool(
    name="derive_files",
    description=(
        "Run a generator over input URIs and return the derived URIs. Existing outputs are "
        "reused; a preprocessed template is checked before building. Call list_generators for "
        "names and get_documentation with section='templates' for the template grammar."
    ),
    annotations=ToolAnnotations(title="Derive Files", readOnlyHint=False, destructiveHint=False),
)
def derive_files_tool(
    generator: str,
    input_uris: list[str],
    output_template: str,
    ctx: Context,
    preprocessed_template: str | None = None,
    promote_preprocessed: bool = True,
) -> str:
    if not input_uris:
        raise ValueError("input_uris must not be empty")
    result = derive_files(
        generator,
        input_uris,
        output_template,
        preprocessed_template=preprocessed_template,
        promote_preprocessed=promote_preprocessed,
        settings=_state(ctx).settings,
    )
    return json.dumps(result, indent=2)


@mcp.tool(
    name="list_generators",
    description="List generator names, their output extensions and upstream requirements.",
    annotations=ToolAnnotations(title="List Generators", readOnlyHint=True, destructiveHint=False),
)
def list_generators() -> str:
    return json.dumps(describe_generators(), indent=2)


@mcp.tool(
    name="get_documentation",
    description="Documentation sections: 'templates', 'generators', 'backends', or omit for overview.",
    annotations=ToolAnnotations(title="Get Documentation", readOnlyHint=True, destructiveHint=False),
)
def get_documentation(section: str | None = None) -> str:
    if section is not None and not isinstance(section, str):
        raise ValueError("section must be a string")
    return get_documentation_text(section)


def main() -> None:
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
