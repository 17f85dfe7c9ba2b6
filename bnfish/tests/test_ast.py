import unittest

import bnfish
from bnfish import Node, Token, Visitor


def make_tree():
    tree = Node("sum")
    tree.properties["TERMS"] = [Token("NUMBER", "1"), Token("NUMBER", "2")]
    child = Node("sign")
    child.properties["OP"] = Token("PLUS", "+")
    tree.properties["SIGN"] = child
    tree.properties["END"] = Token("SEMI", ";")
    return tree


class TestToken(unittest.TestCase):
    def test_equality(self):
        self.assertEqual(Token("A", "x", 0), Token("A", "x", 7))
        self.assertEqual(hash(Token("A", "x", 0)), hash(Token("A", "x", 7)))
        self.assertNotEqual(Token("A", "x"), Token("B", "x"))
        self.assertNotEqual(Token("A", "x"), Token("A", "y"))
        self.assertNotEqual(Token("A", "x"), "x")

    def test_repr(self):
        self.assertEqual(repr(Token("A", "x")), "Token('A', 'x')")


class TestNode(unittest.TestCase):
    def test_accessors(self):
        tree = make_tree()
        self.assertEqual(tree.text("END"), ";")
        self.assertEqual(tree.get_node("SIGN").text("OP"), "+")
        self.assertEqual(
            [token.text for token in tree.get_tokens("TERMS")], ["1", "2"]
        )
        self.assertEqual(len(tree.get_many("TERMS")), 2)
        self.assertIs(tree.get("SIGN"), tree.properties["SIGN"])
        self.assertTrue(tree.has("SIGN"))
        self.assertIn("END", tree)
        self.assertNotIn("OP", tree)

    def test_type_mismatch(self):
        tree = make_tree()
        for accessor, alias in [
            (tree.get, "MISSING"),
            (tree.get_token, "MISSING"),
            (tree.get_token, "SIGN"),
            (tree.get_token, "TERMS"),
            (tree.get_node, "END"),
            (tree.get_node, "TERMS"),
            (tree.get_many, "END"),
            (tree.get_tokens, "SIGN"),
            (tree.get_nodes, "TERMS"),
            (tree.text, "SIGN"),
        ]:
            with self.subTest(accessor=accessor.__name__, alias=alias):
                self.assertRaises(bnfish.TypeMismatch, accessor, alias)

    def test_type_mismatch_is_type_error(self):
        self.assertTrue(issubclass(bnfish.TypeMismatch, TypeError))
        self.assertTrue(issubclass(bnfish.TypeMismatch, bnfish.BnfishError))

    def test_equality(self):
        self.assertEqual(make_tree(), make_tree())
        other = make_tree()
        other.properties["END"] = Token("SEMI", ",")
        self.assertNotEqual(make_tree(), other)
        self.assertNotEqual(Node("a"), Node("b"))

    def test_pretty(self):
        self.assertEqual(
            make_tree().pretty(),
            "\n".join(
                [
                    "+- sum",
                    '   +- "TERMS" []',
                    "   |  +- NUMBER [1]",
                    "   |  +- NUMBER [2]",
                    "   +- sign",
                    '   |  +- "OP" PLUS [+]',
                    '   +- "END" SEMI [;]',
                ]
            ),
        )


class TestVisitor(unittest.TestCase):
    def test_dispatch(self):
        def visit_sign(v, n):
            v.state.append(n.text("OP"))

        visitor = Visitor([])
        visitor.add_visitor("SIGN", visit_sign)
        self.assertTrue(visitor.has_visitor("sign"))
        self.assertFalse(visitor.has_visitor("sum"))
        self.assertEqual(make_tree().walk(visitor), ["+"])

    def test_default_traversal(self):
        def visit_leaf(v, n):
            v.state.append(n.text("VALUE"))

        def leaf(value):
            node = Node("leaf")
            node.properties["VALUE"] = Token("X", value)
            return node

        tree = Node("root")
        middle = Node("middle")
        middle.properties["ITEMS"] = [leaf("b"), Token("Y", "-"), leaf("c")]
        tree.properties["FIRST"] = leaf("a")
        tree.properties["MIDDLE"] = middle
        tree.properties["LAST"] = leaf("d")

        visitor = Visitor([])
        visitor.add_visitor("leaf", visit_leaf)
        tree.accept(visitor)
        self.assertEqual(visitor.state, ["a", "b", "c", "d"])

    def test_handler_controls_descent(self):
        def visit_sum(v, n):
            v.state.append("sum")

        def visit_sign(v, n):
            v.state.append("sign")

        visitor = Visitor([])
        visitor.add_visitor("sum", visit_sum)
        visitor.add_visitor("sign", visit_sign)
        self.assertEqual(make_tree().walk(visitor), ["sum"])

    def test_duplicate(self):
        visitor = Visitor(None)
        visitor.add_visitor("sum", lambda v, n: None)
        self.assertRaises(
            ValueError, visitor.add_visitor, "Sum", lambda v, n: None
        )


if __name__ == "__main__":
    unittest.main()
