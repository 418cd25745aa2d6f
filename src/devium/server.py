"""MCP server exposing page resolution for inspection.

Tools answer, for an app and a device description, which units a page is
composed of, which versions were used to select them, and what the
effective locator map looks like.
"""

import argparse
import logging
from typing import Any, Dict, List

import yaml
from fastmcp import FastMCP

from devium.container import ServiceContainer, get_container, set_container
from devium.domains.page_resolution import PageResolutionError, thaw
from devium.models.config_models import DeviumConfig

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = (
    "Resolve version-aware app pages. Call list_pages to discover the pages "
    "of an app, then resolve_page with the device description to see the "
    "composed units and the effective locator map."
)

mcp = FastMCP("Devium Page Resolution Server", instructions=SERVER_INSTRUCTIONS)


def _device_info(
    app: str,
    platform: str,
    platform_version: str,
    app_version: str | None,
    vendor: str | None,
    vendor_version: str | None,
    application_name: str,
) -> Dict[str, Any]:
    return {
        "app": app,
        "platform": platform,
        "platform_version": platform_version,
        "app_version": app_version,
        "vendor": vendor,
        "vendor_version": vendor_version,
        "application_name": application_name,
    }


def _error(error: Exception) -> Dict[str, Any]:
    return {
        "success": False,
        "error": str(error),
        "error_type": type(error).__name__,
    }


@mcp.tool
async def list_pages(app: str) -> Dict[str, Any]:
    """List the pages declared for an app.

    Args:
        app: App folder name under the apps root.

    Returns:
        Dict[str, Any]: ``success`` and ``pages`` (declaration order of pages.yaml).
    """
    try:
        pages: List[str] = get_container().get_registry(app).pages()
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("Could not list pages of %s: %s", app, e)
        return _error(e)
    return {"success": True, "app": app, "pages": pages}


@mcp.tool
async def resolve_page(
    app: str,
    page: str,
    platform: str,
    platform_version: str,
    app_version: str | None = None,
    vendor: str | None = None,
    vendor_version: str | None = None,
    application_name: str = "",
) -> Dict[str, Any]:
    """Resolve a page for a device description.

    Args:
        app: App folder name under the apps root.
        page: Page name as declared in pages.yaml.
        platform: OS platform, e.g. "android" (capitalized automatically).
        platform_version: OS version, e.g. "12.1".
        app_version: Application version, when app units are declared.
        vendor: OEM skin name, e.g. "Samsung".
        vendor_version: OEM skin version.
        application_name: Device application name; detects TV variants and
            its last token is matched against unit tags.

    Returns:
        Dict[str, Any]: ``success``, ``units`` (filtered declarations),
        ``resolved_versions``, ``chain`` and ``locator_map``; or ``error``
        and ``error_type`` when the page cannot be resolved.
    """
    container = get_container()
    try:
        descriptor = container.describe(_device_info(
            app, platform, platform_version, app_version,
            vendor, vendor_version, application_name,
        ))
        resolution = container.get_resolver(app).resolve(page, descriptor)
    except (PageResolutionError, ValueError, OSError, yaml.YAMLError) as e:
        logger.info("Page %s of %s not resolved: %s", page, app, e)
        return _error(e)
    return {"success": True, "app": app, **resolution.to_dict()}


@mcp.tool
async def get_locator(
    app: str,
    page: str,
    path: str,
    platform: str,
    platform_version: str,
    app_version: str | None = None,
    vendor: str | None = None,
    vendor_version: str | None = None,
    application_name: str = "",
) -> Dict[str, Any]:
    """Look up one locator of a resolved page by dotted path.

    Args:
        app: App folder name under the apps root.
        page: Page name as declared in pages.yaml.
        path: Dotted locator path, e.g. "login.username".
        platform: OS platform.
        platform_version: OS version.
        app_version: Application version.
        vendor: OEM skin name.
        vendor_version: OEM skin version.
        application_name: Device application name.

    Returns:
        Dict[str, Any]: ``success``, ``path`` and ``locator``.
    """
    container = get_container()
    try:
        descriptor = container.describe(_device_info(
            app, platform, platform_version, app_version,
            vendor, vendor_version, application_name,
        ))
        resolution = container.get_resolver(app).resolve(page, descriptor)
        locator = resolution.locator(path)
    except KeyError as e:
        return {"success": False, "error": e.args[0], "error_type": "KeyError"}
    except (PageResolutionError, ValueError, OSError, yaml.YAMLError) as e:
        return _error(e)
    return {
        "success": True,
        "path": path,
        "locator": thaw(locator),
        "chain": resolution.chain_names,
    }


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Devium MCP server for page resolution."
    )
    parser.add_argument(
        "--apps-root",
        dest="apps_root",
        help="Directory holding one folder per app (default: DEVIUM_APPS_ROOT or 'apps').",
    )
    parser.add_argument(
        "--transport",
        dest="transport",
        choices=["stdio", "http", "sse"],
        help="Transport to use for the MCP server (default: stdio).",
    )
    parser.add_argument(
        "--host",
        dest="host",
        help="Host/interface for HTTP transport (default 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        dest="port",
        type=int,
        help="Port for HTTP transport.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    return parser


def main(argv: List[str] | None = None) -> None:
    """Start the devium MCP server."""

    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    config = DeviumConfig.from_env()
    if args.apps_root:
        config.update(APPS_ROOT=args.apps_root)
    if args.log_level:
        config.update(LOG_LEVEL=args.log_level.upper())

    errors = config.validate()
    if errors:
        parser.error("; ".join(errors))

    logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
    set_container(ServiceContainer(config=config))
    logger.info("Starting devium MCP server with apps root %s", config.APPS_ROOT)

    run_kwargs: Dict[str, Any] = {"transport": args.transport or "stdio"}
    if run_kwargs["transport"] != "stdio":
        if args.host:
            run_kwargs["host"] = args.host
        if args.port:
            run_kwargs["port"] = args.port

    try:
        mcp.run(**run_kwargs)
    except KeyboardInterrupt:
        logger.info("Devium MCP server interrupted by user")


if __name__ == "__main__":
    main()
