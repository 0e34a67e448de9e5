"""Тесты для сборщика блоков BlockAssembler."""
import pytest

from textmpl.config.model import Statements, TemplateOptions
from textmpl.errors import StatementError
from textmpl.template.nodes import (
    ConditionalNode,
    ExpressionNode,
    IterationNode,
    SwitchNode,
    TextNode,
    collect_text_content,
    format_ast_tree,
)
from textmpl.template.parser import parse_template
from textmpl.template.tokens import Token, TokenType

from tests.infrastructure import compile_ast


class TestBlockAssembler:
    """Основные тесты сборки AST."""

    def test_parse_empty(self):
        assert parse_template([]) == []

    def test_parse_text_and_expression(self):
        ast = compile_ast("Hello {{name}}!")

        assert ast == [TextNode("Hello "), ExpressionNode("return name"), TextNode("!")]

    def test_multiline_expression_is_not_wrapped(self):
        ast = compile_ast("{{x = 1\nreturn x}}")

        assert ast == [ExpressionNode("x = 1\nreturn x")]

    def test_semicolon_expression_is_not_wrapped(self):
        ast = compile_ast("{{x = 1; return x}}")

        assert ast == [ExpressionNode("x = 1; return x")]

    def test_conditional_branches(self):
        ast = compile_ast("{%if a%}A{%elseif b%}B{%else%}C{%endif%}")

        assert len(ast) == 1
        node = ast[0]
        assert isinstance(node, ConditionalNode)
        assert [b.condition for b in node.branches] == ["return a", "return b"]
        assert node.branches[0].body == [TextNode("A")]
        assert node.branches[1].body == [TextNode("B")]
        assert node.else_body == [TextNode("C")]

    def test_conditional_without_else(self):
        node = compile_ast("{%if a%}A{%endif%}")[0]

        assert isinstance(node, ConditionalNode)
        assert len(node.branches) == 1
        assert node.else_body is None

    def test_iteration_default_index(self):
        node = compile_ast("{%foreach item in items%}{{item}}{%endforeach%}")[0]

        assert isinstance(node, IterationNode)
        assert node.item_name == "item"
        assert node.index_name == "index"
        assert node.collection == "return items"
        assert node.body == [ExpressionNode("return item")]

    def test_iteration_named_index(self):
        node = compile_ast("{%foreach item ,  i in range(3)%}{%endforeach%}")[0]

        assert isinstance(node, IterationNode)
        assert node.item_name == "item"
        assert node.index_name == "i"
        assert node.collection == "return range(3)"
        assert node.body == []

    def test_switch_cases_and_default(self):
        node = compile_ast("{%switch x%}{%case 1%}one{%case 2%}two{%default%}other{%endswitch%}")[0]

        assert isinstance(node, SwitchNode)
        assert node.subject == "return x"
        assert [c.value for c in node.cases] == ["return 1", "return 2"]
        assert node.cases[1].body == [TextNode("two")]
        assert node.default == [TextNode("other")]

    def test_switch_without_default(self):
        node = compile_ast("{%switch x%}{%case 1%}one{%endswitch%}")[0]

        assert isinstance(node, SwitchNode)
        assert node.default is None

    def test_switch_without_cases_uses_body_as_default(self):
        node = compile_ast("{%switch%}Hello !{%endswitch%}")[0]

        assert isinstance(node, SwitchNode)
        assert node.cases == ()
        assert node.default == [TextNode("Hello !")]

    def test_switch_leading_content_joins_first_case(self):
        node = compile_ast("{%switch x%}-{%case 1%}one{%endswitch%}")[0]

        assert isinstance(node, SwitchNode)
        assert node.cases[0].body == [TextNode("-"), TextNode("one")]


class TestNesting:
    """Вложенность одноимённых и разных блоков."""

    def test_same_kind_nesting(self):
        node = compile_ast("{%if a%}{%if b%}X{%endif%}{%endif%}")[0]

        assert isinstance(node, ConditionalNode)
        inner = node.branches[0].body[0]
        assert isinstance(inner, ConditionalNode)
        assert inner.branches[0].condition == "return b"
        assert inner.branches[0].body == [TextNode("X")]

    def test_inner_else_belongs_to_inner_block(self):
        node = compile_ast("{%if a%}{%if b%}X{%else%}Y{%endif%}{%else%}Z{%endif%}")[0]

        assert isinstance(node, ConditionalNode)
        assert node.else_body == [TextNode("Z")]
        inner = node.branches[0].body[0]
        assert inner.else_body == [TextNode("Y")]

    def test_deep_nesting(self):
        depth = 10
        text = "{%if a%}" * depth + "X" + "{%endif%}" * depth
        node = compile_ast(text)[0]

        for _ in range(depth - 1):
            assert isinstance(node, ConditionalNode)
            node = node.branches[0].body[0]
        assert node.branches[0].body == [TextNode("X")]

    def test_mixed_families(self):
        text = (
            "{%foreach item in items%}"
            "{%switch item%}{%case 1%}{%if flag%}one{%endif%}{%default%}?{%endswitch%}"
            "{%endforeach%}"
        )
        loop = compile_ast(text)[0]

        assert isinstance(loop, IterationNode)
        switch = loop.body[0]
        assert isinstance(switch, SwitchNode)
        assert isinstance(switch.cases[0].body[0], ConditionalNode)
        assert switch.default == [TextNode("?")]

    def test_nested_switch_inside_case(self):
        text = "{%switch a%}{%case 1%}{%switch b%}{%case 2%}X{%endswitch%}{%case 3%}Y{%endswitch%}"
        node = compile_ast(text)[0]

        assert isinstance(node, SwitchNode)
        assert [c.value for c in node.cases] == ["return 1", "return 3"]
        assert isinstance(node.cases[0].body[0], SwitchNode)

    def test_if_closer_inside_foreach_is_opaque(self):
        """endif внутри foreach разбирается только рекурсивно."""
        text = "{%if a%}{%foreach x in xs%}{%if x%}1{%endif%}{%endforeach%}{%endif%}"
        node = compile_ast(text)[0]

        assert isinstance(node, ConditionalNode)
        loop = node.branches[0].body[0]
        assert isinstance(loop, IterationNode)
        assert isinstance(loop.body[0], ConditionalNode)


class TestAssemblerErrors:

    @pytest.mark.parametrize("text, opener", [
        ("{%endif%}", "if"),
        ("{%elseif%}", "if"),
        ("{%else%}", "if"),
        ("{%endforeach%}", "foreach"),
        ("{%endswitch%}", "switch"),
        ("{%case%}", "switch"),
        ("{%default%}", "switch"),
    ])
    def test_missing_opener(self, text, opener):
        with pytest.raises(StatementError, match=f"Missing statement: '{opener}'"):
            compile_ast(text)

    @pytest.mark.parametrize("text, closer", [
        ("{%if bool%}", "endif"),
        ("{%foreach array%}", "endforeach"),
        ("{%switch%}", "endswitch"),
        ("{%if a%}{%if b%}{%endif%}", "endif"),
    ])
    def test_missing_closer(self, text, closer):
        with pytest.raises(StatementError, match=f"Missing statement: '{closer}'"):
            compile_ast(text)

    def test_missing_closer_points_at_opener(self):
        with pytest.raises(StatementError) as exc_info:
            compile_ast("text\n{% foreach x in y %}")

        assert exc_info.value.token.name == "foreach"
        assert exc_info.value.token.line == 2

    def test_else_not_last(self):
        with pytest.raises(StatementError, match="Invalid statement: 'else' must be the last element of 'if'"):
            compile_ast("{%if%}{%else%}{%elseif%}{%endif%}")

    def test_duplicate_else(self):
        with pytest.raises(StatementError, match="Invalid statement: duplicate 'else' in 'if'"):
            compile_ast("{%if%}{%else%}{%else%}{%endif%}")

    def test_default_not_last(self):
        with pytest.raises(
            StatementError, match="Invalid statement: 'default' must be the last element of 'switch'"
        ):
            compile_ast("{%switch%}{%default%}{%case%}{%endswitch%}")

    def test_duplicate_default(self):
        with pytest.raises(StatementError, match="Invalid statement: duplicate 'default' in 'switch'"):
            compile_ast("{%switch%}{%default%}{%default%}{%endswitch%}")

    def test_unknown_statement(self):
        with pytest.raises(StatementError, match="Unknown statement: 'hello'"):
            compile_ast("{%hello%}")

    def test_unknown_statement_inside_block(self):
        with pytest.raises(StatementError, match="Unknown statement: 'hello'"):
            compile_ast("{%if a%}{%hello%}{%endif%}")

    def test_nested_ordering_error_is_reported(self):
        with pytest.raises(StatementError, match="duplicate 'else'"):
            compile_ast("{%foreach x in xs%}{%if x%}{%else%}{%else%}{%endif%}{%endforeach%}")

    @pytest.mark.parametrize("text", [
        "{%foreach items%}{%endforeach%}",
        "{%foreach item in %}{%endforeach%}",
        "{%foreach 1item in items%}{%endforeach%}",
        "{%foreach item, a-b in items%}{%endforeach%}",
    ])
    def test_invalid_foreach_arguments(self, text):
        with pytest.raises(StatementError, match="Invalid statement"):
            compile_ast(text)

    @pytest.mark.parametrize("text", [
        "{%foreach index in items%}{%endforeach%}",
        "{%foreach x, x in items%}{%endforeach%}",
    ])
    def test_item_and_index_share_name(self, text):
        with pytest.raises(StatementError, match="item and index share the name"):
            compile_ast(text)

    @pytest.mark.parametrize("text", [
        "{%foreach class in items%}{%endforeach%}",
        "{%foreach item, for in items%}{%endforeach%}",
    ])
    def test_keyword_loop_names(self, text):
        with pytest.raises(StatementError, match="is not a valid name"):
            compile_ast(text)


class TestCustomStatements:

    def test_custom_keywords(self):
        statements = Statements(if_="IF", endif="ENDIF")
        ast = compile_ast("{%IF a%}x{%ENDIF%}", TemplateOptions(statements=statements))

        assert isinstance(ast[0], ConditionalNode)

    def test_default_keyword_becomes_unknown(self):
        statements = Statements(if_="IF", endif="ENDIF")

        with pytest.raises(StatementError, match="Unknown statement: 'if'"):
            compile_ast("{%if a%}x{%endif%}", TemplateOptions(statements=statements))

    def test_tokens_built_by_hand(self):
        tokens = [
            Token(TokenType.STATEMENT, "ok", name="if"),
            Token(TokenType.TEXT, "yes"),
            Token(TokenType.STATEMENT, "", name="endif"),
        ]
        ast = parse_template(tokens)

        assert ast[0].branches[0].condition == "return ok"


class TestDebugHelpers:

    def test_collect_text_content(self):
        ast = compile_ast("a{%if x%}b{%else%}c{%endif%}{%switch y%}{%case 1%}d{%default%}e{%endswitch%}")

        assert collect_text_content(ast) == "abcde"

    def test_format_ast_tree(self):
        ast = compile_ast("{%foreach x in xs%}{{x}}{%endforeach%}")

        assert format_ast_tree(ast) == (
            "IterationNode(x, index in 'return xs')\n"
            "  ExpressionNode('return x')"
        )
