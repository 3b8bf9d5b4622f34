"""Global test fixtures and configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from protomap.utils.config_loader import ConfigLoader

if TYPE_CHECKING:
	from pathlib import Path

SHAPE_JS = """function Shape() {
	this.origin = new Point(0, 0);
}"""

CIRCLE_JS = """function Circle() {
	this.center = new Point(0, 0);
	this.style = new Style();
}
Circle.prototype = new Shape;"""

SQUARE_JS = """function Square() {
	this.corner = new Point(1, 1);
}
Square.prototype = new Shape;"""

LOOSE_JS = """function Loose() {}
Loose.prototype = new Missing;"""


@pytest.fixture(autouse=True)
def reset_config_singleton(monkeypatch: pytest.MonkeyPatch) -> None:
	"""Keep the ConfigLoader singleton and PROTOMAP_* variables from leaking between tests."""
	for name in list(os.environ):
		if name.startswith("PROTOMAP_"):
			monkeypatch.delenv(name)
	monkeypatch.setattr(ConfigLoader, "_instance", None)


@pytest.fixture
def project_files() -> list[tuple[str, str]]:
	"""Entity pairs for a small shape hierarchy with one orphan."""
	return [
		("Shape.js", SHAPE_JS),
		("Circle.js", CIRCLE_JS),
		("Square.js", SQUARE_JS),
		("Loose.js", LOOSE_JS),
	]


@pytest.fixture
def project_dir(tmp_path: Path, project_files: list[tuple[str, str]]) -> Path:
	"""Write the shape project to disk with a few resources and noise files."""
	root = tmp_path / "shapes"
	root.mkdir()
	for name, text in project_files:
		(root / name).write_text(text, encoding="utf-8")
	(root / "img").mkdir()
	(root / "img" / "logo.png").write_bytes(b"\x89PNG")
	(root / "img" / "banner.JPG").write_bytes(b"\xff\xd8")
	(root / "README.txt").write_text("not a source file", encoding="utf-8")
	(root / ".hidden.js").write_text("Hidden.prototype = new Shape;", encoding="utf-8")
	(root / ".git").mkdir()
	(root / ".git" / "config.js").write_text("ignored", encoding="utf-8")
	return root
