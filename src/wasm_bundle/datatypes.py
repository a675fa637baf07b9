"""Core data types for the wasm bundling pipeline.

This module defines the configuration record that every stage of the
release pipeline reads from, together with the compiled-in defaults.
"""

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional


OptLevel = Literal["O0", "O1", "O2", "O3", "O4", "Os", "Oz"]
OPT_LEVELS = ("O0", "O1", "O2", "O3", "O4", "Os", "Oz")

STAGE_NAMES = ("compile", "bindgen", "optimize", "serve")


@dataclass(frozen=True)
class BundleConfig:
    """Configuration for the release pipeline.

    Attributes:
        crate_name: Library crate name; read from Cargo.toml when None.
        target: Compiler target triple.
        profile: Cargo build profile directory name.
        target_dir: Cargo build output root, relative to the workspace.
        output_dir: Bundle directory, relative to the workspace.
        opt_level: wasm-opt optimization level.
        fast_math: Whether wasm-opt may relax floating-point semantics.
        debug_symbols: Whether wasm-opt keeps debug symbols.
        host: Host the local file server binds to.
        port: Port the local file server listens on.
        entry_page: Page inside output_dir opened in the browser.
        serve: Whether to start the local file server.
        open_browser: Whether to open the entry page in the browser.
        timeouts: Per-stage timeout in seconds; missing stages never time out.
        cargo: Cargo executable.
        wasm_bindgen: wasm-bindgen executable.
        wasm_opt: wasm-opt executable.
        report_dir: Directory receiving stage reports.
    """
    crate_name: Optional[str] = None
    target: str = "wasm32-unknown-unknown"
    profile: str = "release"
    target_dir: str = "target"
    output_dir: str = "docs"
    opt_level: OptLevel = "O2"
    fast_math: bool = True
    debug_symbols: bool = False
    host: str = "localhost"
    port: int = 8000
    entry_page: str = "index.html"
    serve: bool = True
    open_browser: bool = True
    timeouts: Dict[str, float] = field(default_factory=dict)
    cargo: str = "cargo"
    wasm_bindgen: str = "wasm-bindgen"
    wasm_opt: str = "wasm-opt"
    report_dir: str = "target/wasm-bundle"

    def timeout_for(self, stage: str) -> Optional[float]:
        """Timeout in seconds for a stage, or None to wait indefinitely."""
        return self.timeouts.get(stage)

    @property
    def viewer_url(self) -> str:
        path = "/".join(part for part in (self.output_dir.strip("/"), self.entry_page) if part)
        return f"http://{self.host}:{self.port}/{path}"
