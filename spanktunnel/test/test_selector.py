
import unittest
from unittest_data_provider import data_provider

from ..spanktunnel.selector import NodeSelector, SelectionPolicy
from ..spanktunnel.exceptions import EmptyAllocationError


def allocations():
    return [
        [['nodeA'], SelectionPolicy.FIRST, ['nodeA']],
        [['nodeA', 'nodeB', 'nodeC'], SelectionPolicy.FIRST, ['nodeA']],
        [['nodeA', 'nodeB', 'nodeC'], SelectionPolicy.LAST, ['nodeC']],
        [['nodeA', 'nodeB', 'nodeC'], SelectionPolicy.ALL, ['nodeA', 'nodeB', 'nodeC']],
        [('gpu01', 'gpu02'), SelectionPolicy.ALL, ['gpu01', 'gpu02']]
    ]


class NodeSelectorTest(unittest.TestCase):
    @data_provider(allocations)
    def test_select_targets(self, nodes, policy: SelectionPolicy, expected: list):
        self.assertEqual(expected, NodeSelector(policy).select_targets(nodes))

    def test_select_target_always_picks_first(self):
        self.assertEqual('nodeA', NodeSelector.select_target(['nodeA', 'nodeB']))
        self.assertEqual('nodeB', NodeSelector.select_target(('nodeB', 'nodeA')))

    def test_empty_allocation_is_an_error_for_every_policy(self):
        with self.assertRaises(EmptyAllocationError):
            NodeSelector.select_target([])

        for policy in SelectionPolicy:
            with self.assertRaises(EmptyAllocationError):
                NodeSelector(policy).select_targets(())
