"""Logo directory registry with lightweight format and dimension probing."""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from PIL import Image, UnidentifiedImageError

LOGGER = logging.getLogger(__name__)

SVG_FORMAT = "svg"
_SVG_TAG_RE = re.compile(rb"<svg[\s>]", re.IGNORECASE)
_LENGTH_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(px)?\s*$")


@dataclass(frozen=True)
class LogoInfo:
    """Probe result for one logo file.

    Attributes:
        name: Filename relative to the logo directory.
        format: Lower-case image format (``svg``, ``png``, ``jpeg``...), or ``None``.
        width: Pixel width, when it could be determined.
        height: Pixel height, when it could be determined.
        error: Reason probing failed, if it did.
    """

    name: str
    format: str | None = None
    width: int | None = None
    height: int | None = None
    error: str | None = None

    @property
    def is_svg(self) -> bool:
        return self.format == SVG_FORMAT

    @property
    def is_square(self) -> bool:
        return self.width is not None and self.width == self.height


def _parse_length(raw: str | None) -> float | None:
    if raw is None:
        return None
    match = _LENGTH_RE.match(raw)
    if not match:
        return None
    return float(match.group(1))


def _parse_viewbox(raw: str | None) -> tuple[float, float] | None:
    if not raw:
        return None
    parts = raw.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        width, height = float(parts[2]), float(parts[3])
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


def _svg_dimensions(payload: bytes) -> tuple[int, int]:
    """Return SVG pixel dimensions from width/height attributes or the viewBox.

    When only one of width/height is present the other is derived from the
    viewBox aspect ratio.
    """

    root = ET.fromstring(payload)
    if not root.tag.lower().endswith("svg"):
        raise ValueError("root element is not <svg>")
    width = _parse_length(root.get("width"))
    height = _parse_length(root.get("height"))
    viewbox = _parse_viewbox(root.get("viewBox"))

    if width is not None and height is not None:
        return round(width), round(height)
    if viewbox is not None:
        ratio = viewbox[0] / viewbox[1]
        if width is not None:
            return round(width), math.floor(width / ratio)
        if height is not None:
            return math.floor(height * ratio), round(height)
        return round(viewbox[0]), round(viewbox[1])
    raise ValueError("no width/height attributes and no usable viewBox")


def _probe_svg(path: Path) -> LogoInfo:
    try:
        width, height = _svg_dimensions(path.read_bytes())
    except (ET.ParseError, ValueError) as exc:
        return LogoInfo(name=path.name, format=SVG_FORMAT, error=str(exc))
    return LogoInfo(name=path.name, format=SVG_FORMAT, width=width, height=height)


def probe_logo(path: Path) -> LogoInfo:
    """Identify the format and dimensions of ``path``.

    Files named ``*.svg`` are parsed as SVG. Anything else goes through Pillow
    first; markup Pillow cannot identify is treated as SVG when it contains an
    ``<svg>`` element anywhere, however long the preamble before it.
    """

    path = Path(path)
    if path.suffix.lower() == ".svg":
        return _probe_svg(path)

    try:
        with Image.open(path) as image:
            fmt = (image.format or "").lower() or None
            width, height = image.size
    except UnidentifiedImageError as exc:
        if _SVG_TAG_RE.search(path.read_bytes()):
            return _probe_svg(path)
        return LogoInfo(name=path.name, error=f"unrecognized image: {exc}")
    except OSError as exc:
        return LogoInfo(name=path.name, error=f"unrecognized image: {exc}")
    return LogoInfo(name=path.name, format=fmt, width=width, height=height)


@dataclass(frozen=True, eq=False)
class LogoRegistry:
    """Immutable lookup of logo filenames built once per process."""

    directory: Path
    logos: Mapping[str, LogoInfo] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "logos", MappingProxyType(dict(self.logos)))

    @classmethod
    def from_directory(cls, directory: Path) -> "LogoRegistry":
        directory = Path(directory)
        if not directory.is_dir():
            LOGGER.warning("Logo directory %s does not exist; every logo reference will be reported", directory)
            return cls(directory=directory)
        logos = {}
        for entry in sorted(directory.iterdir()):
            if not entry.is_file() or entry.name.startswith("."):
                continue
            logos[entry.name] = probe_logo(entry)
        LOGGER.debug("Indexed %s logo(s) from %s", len(logos), directory)
        return cls(directory=directory, logos=logos)

    def __contains__(self, name: object) -> bool:
        return name in self.logos

    def __iter__(self) -> Iterator[LogoInfo]:
        return iter(self.logos.values())

    def __len__(self) -> int:
        return len(self.logos)


__all__ = ["LogoInfo", "LogoRegistry", "probe_logo"]
