import unittest
from types import SimpleNamespace as Obj

from hierarchy.errors import HierarchyIntegrityFault
from hierarchy.traversal import walk_descendants, walk_managers


class Adjacency:
    """id -> manager_id map with the lookups the walks expect."""
    def __init__(self, links):
        self.nodes = {i: Obj(id=i, manager_id=m) for i, m in links.items()}

    def children_of(self, manager_id):
        return sorted((n for n in self.nodes.values() if n.manager_id == manager_id), key=lambda n: n.id)

    def manager_of(self, employee_id):
        return self.nodes.get(employee_id)


class TraversalTests(unittest.TestCase):
    def setUp(self):
        # 1 <- 2 <- {3, 4}, 3 <- 5
        self.tree = Adjacency({1: None, 2: 1, 3: 2, 4: 2, 5: 3})

    def test_descendants_pre_order(self):
        got = walk_descendants(1, self.tree.children_of, max_depth=10)
        self.assertEqual([n.id for n in got], [2, 3, 5, 4])

    def test_descendants_of_leaf(self):
        self.assertEqual(walk_descendants(5, self.tree.children_of, max_depth=10), [])

    def test_managers_nearest_first(self):
        got = walk_managers(self.tree.nodes[5], self.tree.manager_of, max_hops=10)
        self.assertEqual([n.id for n in got], [3, 2, 1])

    def test_managers_of_top_level(self):
        self.assertEqual(walk_managers(self.tree.nodes[1], self.tree.manager_of, max_hops=10), [])

    def test_dangling_manager_ends_chain(self):
        adj = Adjacency({1: 99, 2: 1})
        got = walk_managers(adj.nodes[2], adj.manager_of, max_hops=10)
        self.assertEqual([n.id for n in got], [1])

    def test_cycle_faults_both_ways(self):
        adj = Adjacency({1: 3, 2: 1, 3: 2, 4: 3})
        with self.assertRaises(HierarchyIntegrityFault):
            walk_descendants(1, adj.children_of, max_depth=100)
        with self.assertRaises(HierarchyIntegrityFault) as ctx:
            walk_managers(adj.nodes[4], adj.manager_of, max_hops=100)
        self.assertEqual(ctx.exception.employee_id, 4)

    def test_hop_budget(self):
        with self.assertRaises(HierarchyIntegrityFault):
            walk_managers(self.tree.nodes[5], self.tree.manager_of, max_hops=2)
        with self.assertRaises(HierarchyIntegrityFault):
            walk_descendants(1, self.tree.children_of, max_depth=2)


if __name__ == "__main__":
    unittest.main()
