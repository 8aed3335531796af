import click
import json
import logging
import sys
from typing import List, Optional, Tuple

from colorama import Fore, init

from .client import DAV_METHODS, DEPTH_VALUES
from .config import ConfigError, Settings
from .presets import PresetRegistry, merge_properties, to_request_body
from .presets.validator import validate_property
from .server import serve
from .tools import DavTools

logger = logging.getLogger(__name__)

init(autoreset=True)

def _parse_properties(pairs: Tuple[Tuple[str, str], ...]) -> List:
    """Validate (namespace, name) pairs given on the command line."""
    properties = []
    for namespace, name in pairs:
        prop = validate_property({"namespace": namespace, "name": name})
        if prop is None:
            click.echo(f"{Fore.YELLOW}Skipping invalid property {namespace} {name}", err=True)
            continue
        properties.append(prop)
    return properties

def _parse_headers(values: Tuple[str, ...]) -> dict:
    headers = {}
    for value in values:
        if ':' not in value:
            raise click.BadParameter(f"Header '{value}' must look like 'Name: value'", param_hint='--header')
        name, _, header_value = value.partition(':')
        headers[name.strip()] = header_value.strip()
    return headers

@click.group()
@click.option('--presets-dir', type=click.Path(file_okay=False), help='Directory with user preset files (overrides DAV_PROPERTY_PRESETS_DIR)')
@click.option('--ttl-ms', type=int, help='Preset cache TTL in milliseconds (overrides DAV_PROPERTY_PRESETS_TTL_MS)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def main(ctx, presets_dir: Optional[str], ttl_ms: Optional[int], verbose: bool):
    """WebDAV request relay with property presets."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    try:
        settings = Settings.from_env().with_overrides(presets_dir=presets_dir, presets_ttl_ms=ttl_ms)
    except ConfigError as e:
        click.echo(f"{Fore.RED}Configuration error: {e}", err=True)
        sys.exit(1)
    ctx.obj = {
        'settings': settings,
        'registry': PresetRegistry.from_settings(settings),
    }

@main.group()
def presets():
    """Inspect property presets."""
    pass

@presets.command('list')
@click.option('--json', 'as_json', is_flag=True, help='Print descriptors as JSON')
@click.pass_obj
def list_presets(obj, as_json: bool):
    """List built-in and user presets."""
    descriptors = obj['registry'].list_descriptors()
    if as_json:
        click.echo(json.dumps({"presets": [d.to_dict() for d in descriptors]}, indent=2))
        return

    max_name_len = max(len(d.name) for d in descriptors)
    for d in descriptors:
        origin = "built-in" if d.builtin else "user"
        click.echo(f"  {d.name:<{max_name_len}} : {d.property_count:>3} properties ({origin}) {d.description or ''}".rstrip())

@presets.command('show')
@click.argument('name')
@click.pass_obj
def show_preset(obj, name: str):
    """Print the full definition of a preset."""
    lookup = obj['registry'].lookup(name)
    if not lookup.found:
        click.echo(f"{Fore.RED}Preset '{name}' not found. Available: {', '.join(lookup.available)}", err=True)
        sys.exit(1)
    click.echo(json.dumps(lookup.preset.to_dict(), indent=2))

@presets.command('body')
@click.argument('name')
@click.option('--property', 'extra', type=(str, str), multiple=True, metavar='NAMESPACE NAME',
              help='Extra property to merge into the preset')
@click.pass_obj
def preset_body(obj, name: str, extra: Tuple[Tuple[str, str], ...]):
    """Print the PROPFIND body generated for a preset."""
    lookup = obj['registry'].lookup(name)
    if not lookup.found:
        click.echo(f"{Fore.RED}Preset '{name}' not found. Available: {', '.join(lookup.available)}", err=True)
        sys.exit(1)
    properties = merge_properties(lookup.preset.properties, _parse_properties(extra))
    click.echo(to_request_body(properties))

@main.command()
@click.argument('method', type=click.Choice(DAV_METHODS, case_sensitive=False))
@click.argument('path')
@click.option('--preset', help='Property preset used to generate the PROPFIND body')
@click.option('--property', 'extra', type=(str, str), multiple=True, metavar='NAMESPACE NAME',
              help='Extra property to merge into the preset')
@click.option('--depth', type=click.Choice(DEPTH_VALUES), help='Depth header value')
@click.option('--header', 'header_values', multiple=True, help="Additional header, 'Name: value'")
@click.option('--body', help='Raw request body (ignored when --preset is given)')
@click.pass_obj
def request(obj, method: str, path: str, preset: Optional[str], extra: Tuple[Tuple[str, str], ...],
            depth: Optional[str], header_values: Tuple[str, ...], body: Optional[str]):
    """Send a WebDAV request to the configured server.

    METHOD: WebDAV method (PROPFIND, GET, PUT, ...)
    PATH: Path relative to DAV_SERVER_URL
    """
    tools = DavTools(obj['registry'], obj['settings'])
    arguments = {
        "method": method.upper(),
        "path": path,
        "body": body,
        "headers": _parse_headers(header_values),
        "depth": depth,
        "preset": preset,
        "additionalProperties": [{"namespace": ns, "name": n} for ns, n in extra],
    }
    result = tools.call_tool("dav_request", arguments)
    text = result["content"][0]["text"]
    if result.get("isError"):
        click.echo(f"{Fore.RED}{text}", err=True)
        sys.exit(1)
    click.echo(text)

@main.command('serve')
@click.pass_obj
def serve_command(obj):
    """Run as an MCP server on stdin/stdout."""
    tools = DavTools(obj['registry'], obj['settings'])
    try:
        serve(tools)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")

if __name__ == '__main__':
    main()
