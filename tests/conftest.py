import pytest

from byzantine.om.tree import build_tree

@pytest.fixture(autouse=True)
def fresh_tree_cache():
    # every test builds its topology from scratch
    build_tree.cache_clear()
    yield
    build_tree.cache_clear()
