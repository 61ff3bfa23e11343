"""
Inline Evaluation Results

A library for showing the value of evaluated code as a transient annotation
next to the code in an editor buffer, and for removing it again on a timer,
at the next command, or when the annotated text is edited.
"""

from .core import Annotation, AnnotationStyle, Position, RemovalKind, RemovalPolicy, Span, StyleRun
from .buffer import Buffer, Marker
from .config import AnnotationOptions, FaceSpec, OverlayConfig, ResultFace
from .editor import EditorSurface, MemoryEditor, Timer, Viewport
from .evaluator import Evaluator, MockEvaluator, PythonEvaluator, get_evaluator
from .manager import AnnotationManager
from .commands import get_command, list_commands

__version__ = "0.1.0"

__all__ = [
    "Annotation",
    "AnnotationStyle",
    "Position",
    "RemovalKind",
    "RemovalPolicy",
    "Span",
    "StyleRun",
    "Buffer",
    "Marker",
    "AnnotationOptions",
    "FaceSpec",
    "OverlayConfig",
    "ResultFace",
    "EditorSurface",
    "MemoryEditor",
    "Timer",
    "Viewport",
    "Evaluator",
    "MockEvaluator",
    "PythonEvaluator",
    "get_evaluator",
    "AnnotationManager",
    "get_command",
    "list_commands",
]
