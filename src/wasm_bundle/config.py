"""Configuration utilities for the wasm bundling pipeline.

This module provides utilities for parsing, validating and loading the
pipeline configuration.
"""

from pathlib import Path
from typing import Any, Dict, Mapping

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from wasm_bundle.datatypes import OPT_LEVELS, STAGE_NAMES, BundleConfig


_STRING_FIELDS = (
    'target', 'profile', 'target_dir', 'output_dir', 'host', 'entry_page',
    'cargo', 'wasm_bindgen', 'wasm_opt', 'report_dir',
)
_BOOL_FIELDS = ('fast_math', 'debug_symbols', 'serve', 'open_browser')


def parse_config(args: Mapping[str, Any]) -> BundleConfig:
    """Parse a dictionary of settings into a BundleConfig.

    Keys that are missing or set to None keep their default value.

    Args:
        args: Dictionary of settings, e.g. from the CLI or a TOML file.

    Returns:
        Validated BundleConfig instance.

    Raises:
        ValueError: If a setting is unknown or invalid.
    """
    defaults = default_config()
    known = set(defaults.__dataclass_fields__)
    unknown = sorted(set(args) - known)
    if unknown:
        raise ValueError(f"Unknown configuration key(s): {', '.join(unknown)}")

    values: Dict[str, Any] = {
        name: getattr(defaults, name) for name in known
    }
    values.update({k: v for k, v in args.items() if v is not None})

    for name in _STRING_FIELDS:
        if not isinstance(values[name], str) or not values[name].strip():
            raise ValueError(f"'{name}' must be a non-empty string")

    for name in _BOOL_FIELDS:
        if not isinstance(values[name], bool):
            raise ValueError(f"'{name}' must be true or false")

    crate_name = values['crate_name']
    if crate_name is not None and (not isinstance(crate_name, str) or not crate_name.strip()):
        raise ValueError("'crate_name' must be a non-empty string if specified")

    opt_level = str(values['opt_level']).lstrip('-')
    if opt_level not in OPT_LEVELS:
        raise ValueError(
            f"Optimization level must be one of {', '.join(OPT_LEVELS)}, got '{values['opt_level']}'"
        )

    port = values['port']
    if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
        raise ValueError(f"Port must be an integer between 1 and 65535, got {port!r}")

    if not isinstance(values['timeouts'], Mapping):
        raise ValueError("'timeouts' must be a table of stage = seconds")
    timeouts = dict(values['timeouts'])
    for stage, seconds in timeouts.items():
        if stage not in STAGE_NAMES:
            raise ValueError(f"Timeout given for unknown stage '{stage}'")
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)) or seconds <= 0:
            raise ValueError(f"Timeout for stage '{stage}' must be a positive number of seconds")

    output_dir = Path(values['output_dir'])
    if output_dir.is_absolute() or '..' in output_dir.parts:
        raise ValueError("Output directory must be a path inside the workspace without '..'")

    if Path(values['entry_page']).is_absolute():
        raise ValueError("Entry page must be relative to the output directory")

    return BundleConfig(
        crate_name=crate_name.replace('-', '_') if crate_name else None,
        target=values['target'],
        profile=values['profile'],
        target_dir=values['target_dir'],
        output_dir=values['output_dir'],
        opt_level=opt_level,
        fast_math=values['fast_math'],
        debug_symbols=values['debug_symbols'],
        host=values['host'],
        port=port,
        entry_page=values['entry_page'],
        serve=values['serve'],
        open_browser=values['open_browser'],
        timeouts={stage: float(seconds) for stage, seconds in timeouts.items()},
        cargo=values['cargo'],
        wasm_bindgen=values['wasm_bindgen'],
        wasm_opt=values['wasm_opt'],
        report_dir=values['report_dir'],
    )


def default_config() -> BundleConfig:
    """Create the compiled-in default configuration.

    Returns:
        Default BundleConfig instance.
    """
    return BundleConfig()


def load_config_file(config_path: Path) -> Dict[str, Any]:
    """Load the ``[bundle]`` table of a TOML configuration file.

    Args:
        config_path: Path to the TOML file.

    Returns:
        Dictionary suitable for :func:`parse_config`.

    Raises:
        ValueError: If the file is not valid TOML.
    """
    try:
        data = tomllib.loads(Path(config_path).read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    section = data.get("bundle", {})
    if not isinstance(section, dict):
        raise ValueError(f"[bundle] in {config_path} must be a table")
    return dict(section)


def resolve_crate_name(config: BundleConfig, workspace: Path) -> str:
    """Return the crate's module name, reading Cargo.toml if needed.

    Cargo replaces dashes with underscores in artifact file names, so the
    package name ``tracing-gui`` builds ``tracing_gui.wasm``.

    Raises:
        ValueError: If no crate name is configured and Cargo.toml has none.
    """
    if config.crate_name:
        return config.crate_name

    manifest = Path(workspace) / "Cargo.toml"
    if not manifest.is_file():
        raise ValueError(f"No crate name configured and no Cargo.toml found in {workspace}")

    try:
        data = tomllib.loads(manifest.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {manifest}: {e}") from e

    lib_name = data.get("lib", {}).get("name")
    package_name = data.get("package", {}).get("name")
    name = lib_name or package_name
    if not name:
        raise ValueError(f"{manifest} does not define a package name")
    return str(name).replace('-', '_')
