import unittest

import bnfish
from bnfish.tests.specs import ddl, sqlish


class TestSqlish(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.grammar = bnfish.compile_grammar(sqlish.GRAMMAR)

    def test_rule_count(self):
        self.assertEqual(len(self.grammar), 46)

    def test_queries(self):
        for text, expected in [
            ("age BETWEEN 40 AND 60", 6),
            ("age NOT BETWEEN 40 AND 60", 10),
            ("country EQ 'UK'", 3),
            ("country NE 'UK'", 13),
            ("age GT 50 AND sex EQ 'F'", 4),
            ("age GE 71 OR age LE 18", 3),
            ("country IN ('UK', 'USA')", 6),
            ("country NOT IN ('UK', 'USA')", 10),
            ("name CONTAINS 'an'", 3),
            ("rating ISBLANK", 1),
            ("rating NOT ISBLANK", 15),
            ("(country EQ 'UK' OR country EQ 'USA') AND age LT 40", 2),
            ("sex EQ 'M' AND (rating EQ 'A' OR rating EQ 'B')", 4),
        ]:
            with self.subTest(text=text):
                rows = sqlish.query(self.grammar, text)
                self.assertEqual(len(rows), expected)

    def test_selected_rows(self):
        self.assertEqual(
            sqlish.query(self.grammar, "name CONTAINS 'an'"),
            ["ian", "jane", "brian"],
        )

    def test_tree(self):
        tree = self.grammar.parse("search_condition", "age LT 40")
        self.assertEqual(tree.name, "search_condition")
        (term,) = tree.get_nodes("OR")
        (predicate,) = term.get_nodes("AND")
        self.assertEqual(predicate.name, "comparison_predicate")
        self.assertEqual(predicate.get_token("OPERATOR").kind, "LT_OP")
        self.assertEqual(int(predicate.text("RHV")), 40)

    def test_syntax_errors(self):
        for text in [
            "age",
            "age EQ",
            "age BETWEEN 40",
            "country IN ('UK',)",
            "(age LT 40",
            "age LT 40 AND",
        ]:
            with self.subTest(text=text):
                self.assertRaises(
                    bnfish.ParseError,
                    self.grammar.parse,
                    "search_condition",
                    text,
                )


class TestDDL(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.grammar = bnfish.compile_grammar(ddl.GRAMMAR)

    def test_rule_count(self):
        self.assertEqual(len(self.grammar), 24)

    def test_create_collection(self):
        tree = self.grammar.parse(
            "statement",
            "CREATE COLLECTION MyCollection "
            "( a int NOT NULL , b TEXT , c DATETIME )",
        )
        state = tree.walk(ddl.visitor())
        self.assertEqual(state["name"], "MyCollection")
        self.assertEqual(
            state["columns"],
            [
                ("a", "DATA_TYPE_INTEGER", True),
                ("b", "DATA_TYPE_TEXT", False),
                ("c", "DATA_TYPE_DATETIME", False),
            ],
        )

        table = tree.get_node("STATEMENT")
        first = table.get_nodes("COLUMNS")[0]
        self.assertEqual(
            [token.kind for token in first.get_tokens("NOT_NULL")],
            ["NOT", "NULL"],
        )
        self.assertIn("+- column_definition", tree.pretty())

    def test_invalid(self):
        for text in [
            "CREATE COLLECTION c ( )",
            "CREATE COLLECTION ( a INT )",
            "CREATE COLLECTION c ( a INT NOT )",
            "CREATE COLLECTION c ( a INT, )",
        ]:
            with self.subTest(text=text):
                self.assertRaises(
                    bnfish.ParseError, self.grammar.parse, "statement", text
                )


if __name__ == "__main__":
    unittest.main()
