"""
A small filter language over a list of customer records, e.g.

    (country EQ 'UK' OR country EQ 'USA') AND age LT 40

The visitor state is a stack of predicates (functions of one record).
"""
import bnfish

GRAMMAR = r"""
/* Lexer Rules */

AND             = "\bAND\b";
OR              = "\bOR\b";
EQ_OP           = "\bEQ\b";
NE_OP           = "\bNE\b";
LT_OP           = "\bLT\b";
LE_OP           = "\bLE\b";
GT_OP           = "\bGT\b";
GE_OP           = "\bGE\b";
LEFT_PAREN      = "[(]";
RIGHT_PAREN     = "[)]";
COMMA           = ",";
IN              = "\b(IN)\b";
CONTAINS        = "\bCONTAINS\b";
BETWEEN         = "\bBETWEEN\b";
ISBLANK         = "\bISBLANK\b";
NOT             = "\bNOT\b";
LITERAL_STRING  = "['][^']*[']";
LITERAL_NUMBER  = "[+-]? ((\d+(\.\d*)?)|(\.\d+))";
IDENTIFIER      = "[A-Z_][A-Z_0-9]*";
WHITESPACE      = "\s+";

/* Parser Rules */

comparison_operator =   :EQ_OP | :NE_OP | :LT_OP | :LE_OP | :GT_OP | :GE_OP;
comparison_operand  =   :LITERAL_STRING | :LITERAL_NUMBER | :IDENTIFIER;
comparison_predicate=   LHV:comparison_operand,
                        OPERATOR:comparison_operator,
                        RHV:comparison_operand;
in_factor           =   COMMA!, :comparison_operand;
in_predicate        =   LHV:comparison_operand, NOT:NOT?, IN!, LEFT_PAREN!,
                        RHV:comparison_operand, RHV:in_factor*,
                        RIGHT_PAREN!;
between_predicate   =   LHV:comparison_operand, NOT:NOT?, BETWEEN!,
                        OP1:comparison_operand, AND!,
                        OP2:comparison_operand;
contains_predicate  =   LHV:comparison_operand, NOT:NOT?, CONTAINS!,
                        RHV:comparison_operand;
blank_predicate     =   LHV:comparison_operand, NOT:NOT?, ISBLANK;
predicate           =   :comparison_predicate | :in_predicate
                    |   :between_predicate | :contains_predicate
                    |   :blank_predicate;
boolean_primary     =   :predicate;
boolean_primary     =   LEFT_PAREN!, CONDITION:search_condition,
                        RIGHT_PAREN!;
boolean_factor      =   AND!, :boolean_primary;
boolean_term        =   AND:boolean_primary, AND:boolean_factor*;
search_factor       =   OR!, :boolean_term;
search_condition    =   OR:boolean_term, OR:search_factor*;
"""

FIELDS = ("name", "age", "country", "sex", "rating")

CUSTOMERS = [
    dict(zip(FIELDS, row))
    for row in [
        ("john", 40, "Australia", "M", "A"),
        ("peter", 23, "UK", "M", "C"),
        ("fred", 42, "USA", "M", "A"),
        ("ian", 71, "France", "M", "B"),
        ("tony", 18, "Canada", "M", "B"),
        ("mark", 35, "Germany", "M", "C"),
        ("david", 37, "Italy", "M", "C"),
        ("jane", 52, "USA", "F", ""),
        ("sarah", 55, "UK", "F", "A"),
        ("sue", 61, "Italy", "F", "C"),
        ("alice", 76, "France", "F", "B"),
        ("karen", 39, "Australia", "F", "C"),
        ("kate", 26, "Germany", "F", "A"),
        ("lucy", 46, "Australia", "F", "A"),
        ("brian", 30, "UK", "M", "C"),
        ("paul", 49, "USA", "M", "C"),
    ]
]

COMPARISONS = {
    "EQ_OP": lambda a, b: a == b,
    "NE_OP": lambda a, b: a != b,
    "LT_OP": lambda a, b: a < b,
    "LE_OP": lambda a, b: a <= b,
    "GT_OP": lambda a, b: a > b,
    "GE_OP": lambda a, b: a >= b,
}


def column(token):
    return token.text.lower()


def literal(token):
    if token.kind == "LITERAL_NUMBER":
        return int(token.text)
    return token.text.strip("'")


def negate(n, predicate):
    if n.has("NOT"):
        return lambda row: not predicate(row)
    return predicate


def visit_search_condition(v, n):
    predicates = []
    for term in n.get_nodes("OR"):
        term.accept(v)
        predicates.append(v.state.pop())
    v.state.append(lambda row: any(p(row) for p in predicates))


def visit_boolean_term(v, n):
    predicates = []
    for primary in n.get_nodes("AND"):
        primary.accept(v)
        predicates.append(v.state.pop())
    v.state.append(lambda row: all(p(row) for p in predicates))


def visit_boolean_primary(v, n):
    n.get_node("CONDITION").accept(v)


def visit_comparison_predicate(v, n):
    name = column(n.get_token("LHV"))
    compare = COMPARISONS[n.get_token("OPERATOR").kind]
    value = literal(n.get_token("RHV"))
    v.state.append(lambda row: compare(row[name], value))


def visit_in_predicate(v, n):
    name = column(n.get_token("LHV"))
    values = [literal(token) for token in n.get_tokens("RHV")]
    v.state.append(negate(n, lambda row: row[name] in values))


def visit_between_predicate(v, n):
    name = column(n.get_token("LHV"))
    low = literal(n.get_token("OP1"))
    high = literal(n.get_token("OP2"))
    v.state.append(negate(n, lambda row: low <= row[name] <= high))


def visit_contains_predicate(v, n):
    name = column(n.get_token("LHV"))
    value = literal(n.get_token("RHV"))
    v.state.append(negate(n, lambda row: value in row[name]))


def visit_blank_predicate(v, n):
    name = column(n.get_token("LHV"))
    v.state.append(negate(n, lambda row: not row[name]))


def visitor():
    v = bnfish.Visitor([])
    v.add_visitor("search_condition", visit_search_condition)
    v.add_visitor("boolean_term", visit_boolean_term)
    v.add_visitor("boolean_primary", visit_boolean_primary)
    v.add_visitor("comparison_predicate", visit_comparison_predicate)
    v.add_visitor("in_predicate", visit_in_predicate)
    v.add_visitor("between_predicate", visit_between_predicate)
    v.add_visitor("contains_predicate", visit_contains_predicate)
    v.add_visitor("blank_predicate", visit_blank_predicate)
    return v


def query(grammar, text):
    """The names of the customers that text selects."""
    predicate = grammar.parse("search_condition", text).walk(visitor()).pop()
    return [row["name"] for row in CUSTOMERS if predicate(row)]
