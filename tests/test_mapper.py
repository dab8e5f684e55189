"""
Tests for EntityNodeMapper.
"""

import pytest

from topodelay.interfaces.errors import InvalidParameterError
from topodelay.network.mapper import EntityNodeMapper


class TestEntityNodeMapper:
    def test_map_and_lookup(self):
        mapper = EntityNodeMapper()
        mapper.map(100, 0)

        assert mapper.node_id_for(100) == 0
        assert 100 in mapper
        assert len(mapper) == 1

    def test_unmapped_is_none_not_zero(self):
        mapper = EntityNodeMapper()
        assert mapper.node_id_for(5) is None

    def test_map_then_unmap(self):
        mapper = EntityNodeMapper()
        mapper.map(7, 3)
        mapper.unmap(7)

        assert mapper.node_id_for(7) is None
        assert mapper.entities_for(3) == set()

    def test_remap_overwrites(self):
        mapper = EntityNodeMapper()
        mapper.map(1, 10)
        mapper.map(1, 20)

        assert mapper.node_id_for(1) == 20
        assert mapper.entities_for(10) == set()
        assert mapper.entities_for(20) == {1}

    def test_unmap_missing_is_noop(self):
        mapper = EntityNodeMapper()
        mapper.unmap(99)
        assert len(mapper) == 0

    def test_many_entities_share_a_node(self):
        mapper = EntityNodeMapper()
        mapper.map(1, 4)
        mapper.map(2, 4)

        assert mapper.entities_for(4) == {1, 2}
        assert mapper.mapped_node_ids() == {4}
        assert dict(mapper.items()) == {1: 4, 2: 4}

    @pytest.mark.parametrize("entity_id, node_id", [(-1, 0), (0, -1)])
    def test_negative_ids_rejected(self, entity_id, node_id):
        mapper = EntityNodeMapper()
        with pytest.raises(InvalidParameterError):
            mapper.map(entity_id, node_id)
