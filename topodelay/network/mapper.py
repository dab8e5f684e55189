"""实体到拓扑节点的映射。

仿真实体ID和拓扑图节点ID之间的双向映射。一个实体同一时刻只对应一个
节点，多个实体可以共享同一个节点。映射不校验节点是否存在于图中，
映射可以先于拓扑构建。
"""

from typing import Dict, ItemsView, Optional, Set

from topodelay.interfaces.errors import require_non_negative_id


class EntityNodeMapper:
    """实体-节点映射表"""

    def __init__(self):
        self._entity_to_node: Dict[int, int] = {}
        self._node_to_entities: Dict[int, Set[int]] = {}

    def map(self, entity_id: int, node_id: int) -> None:
        """建立映射，实体已映射时覆盖原映射

        Args:
            entity_id: 实体ID
            node_id: 拓扑图节点ID

        Raises:
            InvalidParameterError: ID为负数
        """
        require_non_negative_id(entity_id, "实体ID")
        require_non_negative_id(node_id, "节点ID")
        self.unmap(entity_id)
        self._entity_to_node[entity_id] = node_id
        self._node_to_entities.setdefault(node_id, set()).add(entity_id)

    def unmap(self, entity_id: int) -> None:
        """解除映射，实体未映射时不做任何操作"""
        node_id = self._entity_to_node.pop(entity_id, None)
        if node_id is None:
            return
        entities = self._node_to_entities[node_id]
        entities.discard(entity_id)
        if not entities:
            del self._node_to_entities[node_id]

    def node_id_for(self, entity_id: int) -> Optional[int]:
        """查询实体对应的节点ID

        Returns:
            节点ID，未映射时返回None（与节点0区分）
        """
        return self._entity_to_node.get(entity_id)

    def entities_for(self, node_id: int) -> Set[int]:
        """查询映射到指定节点的所有实体"""
        return set(self._node_to_entities.get(node_id, ()))

    def mapped_node_ids(self) -> Set[int]:
        return set(self._node_to_entities)

    def items(self) -> ItemsView[int, int]:
        return self._entity_to_node.items()

    def __contains__(self, entity_id: int) -> bool:
        return entity_id in self._entity_to_node

    def __len__(self) -> int:
        return len(self._entity_to_node)
