"""Tests for the command-line interface."""

from click.testing import CliRunner

from conftest import failing_tool, opt_calls
from wasm_bundle.cli import main


def _tool_config(tmp_path, tool_dir, extra=""):
    path = tmp_path / "bundle.toml"
    path.write_text(
        "[bundle]\n"
        f'cargo = "{tool_dir / "cargo"}"\n'
        f'wasm_bindgen = "{tool_dir / "wasm-bindgen"}"\n'
        f'wasm_opt = "{tool_dir / "wasm-opt"}"\n'
        + extra,
        encoding="utf-8",
    )
    return path


def test_dry_run_prints_commands(crate_workspace):
    result = CliRunner().invoke(main, ["--workspace", str(crate_workspace), "--dry-run"])

    assert result.exit_code == 0
    assert "cargo build --release --lib --target wasm32-unknown-unknown" in result.output
    assert "--no-modules --no-typescript" in result.output
    assert "docs/demo_app_bg.wasm -O2 --fast-math -o docs/demo_app_bg.wasm" in result.output
    assert not (crate_workspace / "target").exists()


def test_dry_run_flags(crate_workspace):
    result = CliRunner().invoke(main, [
        "--workspace", str(crate_workspace), "--dry-run",
        "--opt-level", "Oz", "--no-fast-math", "--debug-symbols", "--port", "9001",
    ])

    assert result.exit_code == 0
    assert "docs/demo_app_bg.wasm -Oz -g -o docs/demo_app_bg.wasm" in result.output
    assert "http://localhost:9001/docs/index.html" in result.output


def test_configuration_error(crate_workspace):
    result = CliRunner().invoke(main, ["--workspace", str(crate_workspace), "--port", "0"])

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_missing_cargo_manifest(tmp_path):
    result = CliRunner().invoke(main, ["--workspace", str(tmp_path), "--dry-run"])

    assert result.exit_code == 2
    assert "Cargo.toml" in result.output


def test_full_run(tmp_path, crate_workspace, tool_dir):
    config = _tool_config(tmp_path, tool_dir)
    result = CliRunner().invoke(main, [
        "--workspace", str(crate_workspace), "--config", str(config),
        "--no-serve", "--no-open", "--verbose",
    ])

    assert result.exit_code == 0, result.output
    assert "OPTIMIZE  : success" in result.output
    assert "Before (bytes)" in result.output
    assert len(opt_calls(tool_dir)) == 1


def test_cli_flags_override_config_file(tmp_path, crate_workspace, tool_dir):
    config = _tool_config(tmp_path, tool_dir, 'opt_level = "O3"\nfast_math = false\n')
    result = CliRunner().invoke(main, [
        "--workspace", str(crate_workspace), "--config", str(config),
        "--no-serve", "--no-open", "--opt-level", "Os",
    ])

    assert result.exit_code == 0, result.output
    argv = opt_calls(tool_dir)[0]
    assert "-Os" in argv
    assert "--fast-math" not in argv


def test_exit_code_of_failing_stage(tmp_path, crate_workspace, tool_dir):
    failing_tool(tool_dir / "cargo", 101)
    config = _tool_config(tmp_path, tool_dir)
    result = CliRunner().invoke(main, [
        "--workspace", str(crate_workspace), "--config", str(config), "--no-serve", "--no-open",
    ])

    assert result.exit_code == 101
    assert "BINDGEN   : skipped" in result.output
    assert opt_calls(tool_dir) == []


def test_malformed_timeouts_table(tmp_path, crate_workspace, tool_dir):
    config = _tool_config(tmp_path, tool_dir, "timeouts = 5\n")
    result = CliRunner().invoke(main, [
        "--workspace", str(crate_workspace), "--config", str(config), "--dry-run",
    ])

    assert result.exit_code == 2
    assert "Configuration error" in result.output
    assert "timeouts" in result.output


def test_output_dir_outside_workspace(crate_workspace, tmp_path):
    result = CliRunner().invoke(main, [
        "--workspace", str(crate_workspace), "--dry-run", "--output-dir", str(tmp_path / "public"),
    ])

    assert result.exit_code == 2
    assert "inside the workspace" in result.output
