
from enum import Enum
from typing import List, Sequence
from .exceptions import EmptyAllocationError


class SelectionPolicy(Enum):
    FIRST = 'first'
    LAST = 'last'
    ALL = 'all'


class NodeSelector(object):
    """
    Decides which allocated node(s) the tunnel goes to.
    One endpoint is enough to reach the whole allocation, so by default it is the first node
    """

    policy: SelectionPolicy

    def __init__(self, policy: SelectionPolicy = SelectionPolicy.FIRST):
        self.policy = policy

    @staticmethod
    def select_target(nodes: Sequence[str]) -> str:
        if not nodes:
            raise EmptyAllocationError('Cannot select a tunnel target from an empty allocation')

        return nodes[0]

    def select_targets(self, nodes: Sequence[str]) -> List[str]:
        if not nodes:
            raise EmptyAllocationError('Cannot select a tunnel target from an empty allocation')

        if self.policy == SelectionPolicy.LAST:
            return [nodes[-1]]

        if self.policy == SelectionPolicy.ALL:
            return list(nodes)

        return [self.select_target(nodes)]
