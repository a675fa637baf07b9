"""Command-line interface for the wasm bundler.

Running ``wasm-bundle`` with no arguments compiles, binds, optimizes and
serves the crate in the current directory using the built-in defaults.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from wasm_bundle.config import load_config_file, parse_config
from wasm_bundle.datatypes import OPT_LEVELS, STAGE_NAMES
from wasm_bundle.pipeline import build_pipeline, make_context, pipeline_exit_code, run_pipeline
from wasm_bundle.reporting.tables import create_outcome_table, create_size_table


@click.command()
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help='TOML file with a [bundle] table')
@click.option('--workspace', type=click.Path(exists=True, file_okay=False, path_type=Path),
              default=None, help='Crate directory (defaults to the current directory)')
@click.option('--crate', 'crate_name', type=str, default=None, help='Crate name (read from Cargo.toml by default)')
@click.option('--output-dir', type=str, default=None, help='Bundle output directory')
@click.option('--opt-level', type=click.Choice(OPT_LEVELS), default=None, help='wasm-opt optimization level')
@click.option('--fast-math/--no-fast-math', default=None, help='Relax floating-point semantics in wasm-opt')
@click.option('--debug-symbols/--no-debug-symbols', default=None, help='Keep debug symbols in the optimized binary')
@click.option('--port', type=int, default=None, help='Local server port')
@click.option('--serve/--no-serve', default=None, help='Start the local file server')
@click.option('--open/--no-open', 'open_browser', default=None, help='Open the bundle in a browser')
@click.option('--timeout', type=float, default=None, help='Per-stage timeout in seconds for every tool stage')
@click.option('--dry-run', is_flag=True, help='Print the stage commands without running them')
@click.option('--verbose', is_flag=True, help='Verbose output')
def main(
    config_path: Optional[Path],
    workspace: Optional[Path],
    crate_name: Optional[str],
    output_dir: Optional[str],
    opt_level: Optional[str],
    fast_math: Optional[bool],
    debug_symbols: Optional[bool],
    port: Optional[int],
    serve: Optional[bool],
    open_browser: Optional[bool],
    timeout: Optional[float],
    dry_run: bool,
    verbose: bool
):
    """Build, optimize and serve a wasm bundle for the browser."""
    config_dict: Dict[str, Any] = {}

    try:
        if config_path is not None:
            config_dict.update(load_config_file(config_path))

        overrides = {
            'crate_name': crate_name,
            'output_dir': output_dir,
            'opt_level': opt_level,
            'fast_math': fast_math,
            'debug_symbols': debug_symbols,
            'port': port,
            'serve': serve,
            'open_browser': open_browser,
        }
        config_dict.update({k: v for k, v in overrides.items() if v is not None})
        if timeout is not None:
            timeouts = dict(config_dict.get('timeouts', {}))
            timeouts.update({name: timeout for name in STAGE_NAMES if name != 'serve'})
            config_dict['timeouts'] = timeouts

        cfg = parse_config(config_dict)
        context = make_context(cfg, workspace)
        stages = build_pipeline(context)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)

    if verbose or dry_run:
        click.echo("Configuration:")
        click.echo(f"  Workspace: {context.workspace}")
        click.echo(f"  Target: {cfg.target} ({cfg.profile})")
        click.echo(f"  Output: {cfg.output_dir}")
        click.echo(f"  wasm-opt: -{cfg.opt_level}, fast-math={cfg.fast_math}, debug-symbols={cfg.debug_symbols}")
        click.echo(f"  Viewer: {cfg.viewer_url}")

    if dry_run:
        click.echo("\nStages:")
        for stage in stages:
            click.echo(f"  {stage.name}: {' '.join(stage.config['command'])}")
        sys.exit(0)

    click.echo("=" * 60)
    click.echo("WASM BUNDLE")
    click.echo("=" * 60)

    outcomes = run_pipeline(stages, context)
    exit_code = pipeline_exit_code(outcomes)

    click.echo("\n" + "=" * 40)
    click.echo("STAGES:")
    click.echo("-" * 40)
    for outcome in outcomes:
        click.echo(f"{outcome.name.upper():10s}: {outcome.status}")
        for warning in outcome.details.get('warnings', []):
            click.echo(f"  Warning: {warning}")

    if verbose:
        click.echo("")
        click.echo(create_outcome_table(outcomes).to_string())
        sizes = create_size_table(outcomes)
        if not sizes.empty:
            click.echo("")
            click.echo(sizes.to_string(index=False))
        click.echo(f"\nReports written to: {context.report_root}")

    if exit_code != 0:
        click.echo(f"\nPipeline failed (exit code {exit_code})", err=True)
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
