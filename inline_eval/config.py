"""
Configuration for inline results.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Optional

from .core import RemovalPolicy


@dataclass(frozen=True)
class FaceSpec:
    """Visual attributes for one background mode."""
    background: str
    box: Optional[str] = None

    def to_dict(self) -> dict:
        attributes = {"background": self.background}
        if self.box is not None:
            attributes["box"] = self.box
        return attributes


@dataclass(frozen=True)
class ResultFace:
    """The result face, distinguished by light and dark displays."""
    light: FaceSpec = FaceSpec(background="grey90", box="yellow")
    dark: FaceSpec = FaceSpec(background="grey10", box="black")

    def resolve(self, mode: str) -> dict:
        """Attributes for a "light" or "dark" display."""
        if mode == "dark":
            return self.dark.to_dict()
        return self.light.to_dict()


PRINTERS: dict[str, Callable[[Any], str]] = {
    "repr": repr,
    "str": str,
}


@dataclass
class OverlayConfig:
    """Settings shared by every annotation an AnnotationManager creates."""
    result_prefix: str = "=> "
    use_syntax_coloring: bool = True
    removal_policy: RemovalPolicy = field(default_factory=RemovalPolicy.before_next_command)
    face: ResultFace = field(default_factory=ResultFace)
    use_overlays: bool = True  # False: report results on the status line only
    default_width: int = 80  # Stands in for the viewport width of undisplayed buffers
    printer: Callable[[Any], str] = repr
    properties: dict = field(default_factory=dict)  # Pass-through style attributes

    def __post_init__(self):
        if self.default_width <= 0:
            raise ValueError("default_width must be positive")

    @classmethod
    def from_dict(cls, data: dict) -> "OverlayConfig":
        """
        Create a config from plain values, e.g. a parsed settings file.

        removal_policy takes the loose forms RemovalPolicy.parse() accepts,
        printer names an entry in PRINTERS, and face is a mapping with
        optional "light" and "dark" mappings of background/box.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")

        values = dict(data)
        if "removal_policy" in values:
            values["removal_policy"] = RemovalPolicy.parse(values["removal_policy"])
        if "printer" in values and isinstance(values["printer"], str):
            name = values["printer"]
            if name not in PRINTERS:
                raise ValueError(f"Unknown printer: {name}. Available: {list(PRINTERS.keys())}")
            values["printer"] = PRINTERS[name]
        if "face" in values and isinstance(values["face"], dict):
            face = values["face"]
            defaults = ResultFace()
            values["face"] = ResultFace(
                light=FaceSpec(**face["light"]) if "light" in face else defaults.light,
                dark=FaceSpec(**face["dark"]) if "dark" in face else defaults.dark,
            )
        if "properties" in values:
            values["properties"] = dict(values["properties"])
        return cls(**values)

    def to_dict(self) -> dict:
        """Convert config to plain values."""
        printer = next((name for name, fn in PRINTERS.items() if fn is self.printer), None)
        return {
            "result_prefix": self.result_prefix,
            "use_syntax_coloring": self.use_syntax_coloring,
            "removal_policy": self.removal_policy.to_value(),
            "face": {
                "light": self.face.light.to_dict(),
                "dark": self.face.dark.to_dict(),
            },
            "use_overlays": self.use_overlays,
            "default_width": self.default_width,
            "printer": printer,
            "properties": dict(self.properties),
        }


@dataclass
class AnnotationOptions:
    """Per-call overrides for AnnotationManager.create()."""
    category: str = "result"
    removal_policy: Optional[RemovalPolicy] = None  # None: use the config's
    display_format: Optional[str] = None  # One replacement field, e.g. " => {} "
    face: str = "result"
    properties: dict = field(default_factory=dict)  # Merged over config.properties
