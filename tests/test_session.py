"""Tests for the project session lifecycle."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from protomap.analyzer.pattern_extractor import MembershipMode
from protomap.exceptions import MaterializationError
from protomap.graph.serializer import ViewType
from protomap.project_source import StaticProjectSource
from protomap.session import ProjectSession
from protomap.utils.config_loader import ConfigLoader


@pytest.fixture
def source(project_files: list[tuple[str, str]]) -> StaticProjectSource:
	"""In-memory project with resources."""
	return StaticProjectSource(project_files, ["img1.png", "img2.png"])


@pytest.mark.asyncio
async def test_hierarchy_view_end_to_end(source: StaticProjectSource) -> None:
	"""A view request materializes, resolves and renders the project."""
	session = ProjectSession(source)

	result = await session.request_view(ViewType.HIERARCHY)
	wire = result.document.to_wire()

	assert [node["txt"] for node in wire["nodes"]] == ["Shape.js", "Circle.js", "Square.js"]
	assert wire["connections"] == [
		{"nodeA": 1, "nodeB": 0, "conA": "top", "conB": "bottom"},
		{"nodeA": 2, "nodeB": 0, "conA": "top", "conB": "bottom"},
	]
	assert set(result.sources) == {"Shape.js", "Circle.js", "Square.js", "Loose.js"}


@pytest.mark.asyncio
async def test_repeated_views_reuse_registry(project_files: list[tuple[str, str]]) -> None:
	"""Switching views does not fetch the project again and keeps node ids stable."""
	source = StaticProjectSource()
	source.fetch_entities = AsyncMock(return_value=project_files)
	session = ProjectSession(source)

	first = await session.request_view("all")
	await session.request_view("hierarchy")
	again = await session.request_view("all")

	source.fetch_entities.assert_awaited_once()
	assert first.document == again.document


@pytest.mark.asyncio
async def test_resource_view_does_not_load_entities(source: StaticProjectSource) -> None:
	"""The resource view only needs resource names."""
	session = ProjectSession(source)

	result = await session.request_view(ViewType.RESOURCE)

	assert [node.label for node in result.document.nodes] == ["img1.png", "img2.png"]
	assert result.sources is None
	assert session.registry.is_empty


@pytest.mark.asyncio
async def test_resources_are_fetched_once() -> None:
	"""Resource names are cached for the session."""
	source = StaticProjectSource()
	source.fetch_resources = AsyncMock(return_value=["a.png"])
	session = ProjectSession(source)

	await session.request_view("resource")
	await session.request_view("resource")

	source.fetch_resources.assert_awaited_once()


@pytest.mark.asyncio
async def test_resource_failure_is_reported() -> None:
	"""A failing resource listing raises MaterializationError."""
	source = StaticProjectSource()
	source.fetch_resources = AsyncMock(side_effect=OSError("disk gone"))
	session = ProjectSession(source)

	with pytest.raises(MaterializationError, match="disk gone"):
		await session.request_view("resource")


@pytest.mark.asyncio
async def test_composition_view_placeholder(source: StaticProjectSource) -> None:
	"""The composition view is an explicit not-implemented result."""
	result = await ProjectSession(source).request_view(ViewType.COMPOSITION)

	assert result.implemented is False
	assert result.document.nodes == []


@pytest.mark.asyncio
async def test_no_project_loaded() -> None:
	"""Views need a project."""
	with pytest.raises(MaterializationError, match="No project loaded"):
		await ProjectSession().request_view("all")


@pytest.mark.asyncio
async def test_entity_fetch_failure_allows_retry(project_files: list[tuple[str, str]]) -> None:
	"""After a failed fetch the next view request tries again."""
	source = StaticProjectSource()
	source.fetch_entities = AsyncMock(side_effect=[ConnectionError("offline"), project_files])
	session = ProjectSession(source)

	with pytest.raises(MaterializationError):
		await session.request_view("all")
	result = await session.request_view("all")

	assert len(result.document.nodes) == 4


@pytest.mark.asyncio
async def test_loading_new_project_discards_stale_fetch(project_files: list[tuple[str, str]]) -> None:
	"""A slow load for the old project cannot populate the new project's registry."""
	started = asyncio.Event()

	class SlowSource(StaticProjectSource):
		async def fetch_entities(self) -> list[tuple[str, str]]:
			started.set()
			await asyncio.sleep(10)
			return project_files

	session = ProjectSession(SlowSource())
	stale_request = asyncio.create_task(session.request_view("all"))
	await started.wait()

	session.load_project(StaticProjectSource([("Only.js", "function Only() {}")]))

	with pytest.raises(MaterializationError):
		await stale_request
	result = await session.request_view("all")
	assert [node.label for node in result.document.nodes] == ["Only.js"]


@pytest.mark.asyncio
async def test_strict_membership_session() -> None:
	"""The session's membership mode reaches the extractor."""
	source = StaticProjectSource([("A.js", "a = new FooBar(); b = new Foo();")])
	session = ProjectSession(source, membership=MembershipMode.STRICT)

	registry = await session.materialize()

	assert registry.get("A.js").composed_type_names == ("FooBar", "Foo")


def test_from_config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
	"""Session settings come from the configuration."""
	monkeypatch.chdir(tmp_path)
	config_file = tmp_path / "custom.yml"
	config_file.write_text(
		"project:\n  source_suffix: .xx\nanalyzer:\n  membership: strict\nlayout:\n  origin_x: 0\n",
		encoding="utf-8",
	)

	session = ProjectSession.from_config(ConfigLoader(str(config_file)))

	assert session.source_suffix == ".xx"
	assert session.membership is MembershipMode.STRICT
	assert session.serializer.layout.origin_x == 0
	assert session.registry.source_suffix == ".xx"


@pytest.mark.asyncio
async def test_empty_project_is_a_materialization_failure() -> None:
	"""A project without entities or resources fails the view request instead of rendering nothing."""
	session = ProjectSession(StaticProjectSource([], []))

	with pytest.raises(MaterializationError, match="no entities"):
		await session.request_view(ViewType.ALL)
	with pytest.raises(MaterializationError, match="no resources"):
		await session.request_view(ViewType.RESOURCE)

	assert session.registry.is_empty


@pytest.mark.asyncio
async def test_empty_resource_listing_is_retried(project_files: list[tuple[str, str]]) -> None:
	"""An empty listing is not cached; the next request lists again."""
	source = StaticProjectSource(project_files)
	source.fetch_resources = AsyncMock(side_effect=[[], ["late.png"]])
	session = ProjectSession(source)

	with pytest.raises(MaterializationError):
		await session.request_view("resource")
	result = await session.request_view("resource")

	assert [node.label for node in result.document.nodes] == ["late.png"]
	assert source.fetch_resources.await_count == 2
