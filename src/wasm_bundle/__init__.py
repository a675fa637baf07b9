"""Release bundler for browser-loaded wasm modules.

Compiles a Rust library to wasm, generates its JS bindings, optimizes the
binary and serves the result locally.
"""

__version__ = "0.1.0"

from wasm_bundle.datatypes import (
    BundleConfig,
    OptLevel,
)

__all__ = [
    "BundleConfig",
    "OptLevel",
]
