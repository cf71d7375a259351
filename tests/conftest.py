from __future__ import annotations

import pytest

from tests._fixtures.graph_builder import GraphBuilder, sample_app


@pytest.fixture
def graph_builder() -> GraphBuilder:
    """Provide an empty graph builder rooted at a fake absolute project path."""
    return GraphBuilder()


@pytest.fixture
def app_builder(graph_builder: GraphBuilder) -> GraphBuilder:
    """Provide a graph builder pre-populated with a small web app."""
    return sample_app(graph_builder)
