"""Core building blocks: project model, compile and bundle steps."""

from .bundle import AssetBundle, write_bundle
from .compiler import COMPILED_ENTRY_NAME, Dart2JsCompiler
from .project import WebProject
from .runner import CommandResult, run_command

__all__ = [
    "AssetBundle",
    "write_bundle",
    "COMPILED_ENTRY_NAME",
    "Dart2JsCompiler",
    "WebProject",
    "CommandResult",
    "run_command",
]
