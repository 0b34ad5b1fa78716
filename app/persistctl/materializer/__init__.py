"""Materialization of sorted directory specs on the real filesystem."""

from persistctl.materializer.materializer import (
    DirectoryAction,
    DirectoryMaterializer,
    MaterializedPath,
    PathSide,
)
from persistctl.materializer.state import ProcessedState

__all__ = [
    "DirectoryAction",
    "DirectoryMaterializer",
    "MaterializedPath",
    "PathSide",
    "ProcessedState",
]
