"""
Tests for the symbol table, the IR builder and its backpatching.

These tests verify:
- Declarations and variable lookups through the symbol table
- Jump targets resolved for if, if/else and while
- Control stack misuse is reported instead of producing a broken program
- The fixed-column listing
"""

import pytest

import compiler
from compiler import Kind, Op


def ops(program):
    return [instr.op for instr in program]


def find(program, op):
    return [instr for instr in program if instr.op == op]


class TestSymbolTable:

    def test_declare_sets_default_values(self):
        table = compiler.SymbolTable()
        n = table.declare("n", Kind.INTEGER)
        s = table.declare("s", Kind.STRING)
        assert (n.value, s.value) == (0, "")
        assert table.lookup("n") is n

    def test_duplicate_declaration(self):
        table = compiler.SymbolTable()
        table.declare("x", Kind.INTEGER)
        with pytest.raises(compiler.DuplicateDeclaration, match="already declared"):
            table.declare("x", Kind.STRING, 3, 7)

    def test_lookup_missing(self):
        with pytest.raises(compiler.UndeclaredVariable) as excinfo:
            compiler.SymbolTable().lookup("ghost", 2, 5)
        assert (excinfo.value.line, excinfo.value.column) == (2, 5)

    def test_reset_and_as_dict(self):
        table = compiler.SymbolTable()
        table.declare("n", Kind.INTEGER).value = 9
        table.declare("s", Kind.STRING).value = "abc"
        table.reset()
        assert table.as_dict() == {
            "n": {"type": "integer", "value": 0},
            "s": {"type": "string", "value": ""},
        }


class TestDeclarations:

    def test_declarations_in_order(self):
        program = compiler.build("integer a string b declare integer c").program
        assert ops(program) == [Op.DECLARE] * 3
        assert [i.index for i in program] == [0, 1, 2]
        assert [i.variable.name for i in program] == ["a", "b", "c"]
        assert [i.kind for i in program] == [Kind.INTEGER, Kind.STRING, Kind.INTEGER]

    def test_duplicate_in_source(self):
        with pytest.raises(compiler.DuplicateDeclaration) as excinfo:
            compiler.build("integer x\nstring x")
        assert (excinfo.value.line, excinfo.value.column) == (2, 8)

    def test_undeclared_in_assignment(self):
        with pytest.raises(compiler.UndeclaredVariable, match="'y'"):
            compiler.build("integer x y := 1")

    def test_undeclared_in_expression(self):
        with pytest.raises(compiler.UndeclaredVariable, match="'z'"):
            compiler.build("integer x x := z + 1")


class TestOperands:

    def test_assignment_target_is_void(self, gen, make_token):
        gen.declare_integer(make_token("x"))
        gen.assignment_target(make_token("x"))
        gen.expression_variable(make_token("x"))
        target, value = gen.program[1], gen.program[2]
        assert target.op == value.op == Op.VARIABLE
        assert target.kind == Kind.VOID
        assert value.kind == Kind.INTEGER
        assert target.variable is value.variable

    def test_literals(self, gen, make_token):
        gen.integer_literal(make_token("17", 'INTVAL'))
        gen.string_literal(make_token("hi", 'STRVAL'))
        assert (gen.program[0].kind, gen.program[0].literal) == (Kind.INTEGER, 17)
        assert (gen.program[1].kind, gen.program[1].literal) == (Kind.STRING, "hi")

    def test_operator_spellings(self, gen):
        for symbol in ['+', '-', '-1', '*', '/', '==', '!=', '<>', '<', '<=', '>', '>=', '!', '||', '&&']:
            gen.operator(symbol)
        assert ops(gen.program) == [
            Op.ADD, Op.SUB, Op.NEG, Op.MUL, Op.DIV, Op.EQ, Op.NE, Op.NE,
            Op.LT, Op.LE, Op.GT, Op.GE, Op.NOT, Op.OR, Op.AND]
        assert all(i.kind == Kind.VOID for i in gen.program)

    def test_unknown_operator(self, gen):
        with pytest.raises(compiler.InternalError):
            gen.operator('%')

    def test_position_comes_from_token(self, gen, make_token):
        gen.declare_integer(make_token("x", line=4, column=9))
        gen.assignment_target(make_token("x", line=5, column=1))
        gen.assign()
        assert [(i.line, i.column) for i in gen.program] == [(4, 9), (5, 1), (5, 1)]


class TestBackpatching:

    def test_if_without_else(self):
        program = compiler.build("integer x if x < 1 print x end").program
        (if_instr,) = find(program, Op.IF)
        (end,) = find(program, Op.END)
        assert if_instr.target == end.index

    def test_if_with_else(self):
        program = compiler.build("integer x if x < 1 print 1 else print 2 end").program
        (if_instr,) = find(program, Op.IF)
        (goto,) = find(program, Op.GOTO)
        (else_mark,) = find(program, Op.ELSE)
        (end,) = find(program, Op.END)
        assert if_instr.target == else_mark.index
        assert goto.index == else_mark.index - 1
        assert goto.target == end.index

    def test_while_loop(self):
        program = compiler.build("integer i while i < 3 i := i + 1 end").program
        (head,) = find(program, Op.WHILE)
        (guard,) = find(program, Op.IF)
        (goto,) = find(program, Op.GOTO)
        (end,) = find(program, Op.END)
        assert guard.target == end.index
        assert head.target == end.index
        assert goto.index == end.index - 1
        assert goto.target == head.index
        assert goto.target < goto.index

    def test_nested_loops(self):
        gen = compiler.build("""
integer i integer j
while i < 2
  while j < 2
    j := j + 1
  end
  i := i + 1
end
""")
        program = gen.program
        heads = find(program, Op.WHILE)
        gotos = find(program, Op.GOTO)
        ends = find(program, Op.END)
        # inner loop closes first
        assert [g.target for g in gotos] == [heads[1].index, heads[0].index]
        assert [h.target for h in heads] == [ends[1].index, ends[0].index]
        assert gen.control == []

    def test_if_else_inside_while(self):
        program = compiler.build("""
integer i
while i < 2
  if i == 0 print 0 else print 1 end
  i := i + 1
end
""").program
        guard, inner = find(program, Op.IF)
        (head,) = find(program, Op.WHILE)
        else_goto, back_goto = find(program, Op.GOTO)
        inner_end, loop_end = find(program, Op.END)
        assert inner.target == find(program, Op.ELSE)[0].index
        assert else_goto.target == inner_end.index
        assert back_goto.target == head.index
        assert guard.target == loop_end.index

    def test_every_jump_is_resolved(self):
        program = compiler.build("""
integer a
while a < 5
  if a < 2 print "low" else if a < 4 print "mid" else print "high" end end
  a := a + 1
end
""").program
        for instr in find(program, Op.IF) + find(program, Op.GOTO):
            assert instr.target is not None
            assert 0 <= instr.target < len(program)


class TestUnbalancedControl:

    def test_unclosed_if(self, gen):
        gen.if_head()
        with pytest.raises(compiler.UnbalancedControlConstruct, match="'if' is not closed"):
            gen.finish()

    def test_unclosed_while(self, gen):
        gen.while_head()
        gen.if_head()
        with pytest.raises(compiler.UnbalancedControlConstruct, match="'while' is not closed"):
            gen.finish()

    def test_end_without_open_block(self, gen):
        with pytest.raises(compiler.UnbalancedControlConstruct):
            gen.block_end()

    def test_second_else(self, gen):
        gen.if_head()
        gen.else_clause()
        with pytest.raises(compiler.UnbalancedControlConstruct, match="'else'"):
            gen.else_clause()

    def test_else_without_if(self, gen):
        with pytest.raises(compiler.UnbalancedControlConstruct):
            gen.else_clause()

    def test_else_on_loop_guard(self, gen):
        gen.while_head()
        gen.if_head()
        with pytest.raises(compiler.UnbalancedControlConstruct, match="while"):
            gen.else_clause()

    def test_loop_without_condition(self, gen):
        gen.while_head()
        with pytest.raises(compiler.UnbalancedControlConstruct, match="no condition"):
            gen.block_end()

    def test_balanced_program_finishes(self, gen):
        gen.if_head()
        gen.block_end()
        assert gen.finish() is gen.program


class TestListing:

    def test_listing_format(self):
        gen = compiler.build("declare integer x; x := 2 + 3; print x;")
        assert gen.render() == (
            "    0:  int  decl  x\n"
            "    1:  int  var   x\n"
            "    2:  int  cte   2\n"
            "    3:  int  cte   3\n"
            "    4:       +\n"
            "    5:       :=\n"
            "    6:  int  var   x\n"
            "    7:       print\n"
        )

    def test_string_and_jump_operands(self):
        gen = compiler.build('string s if 1 > 0 s := "hi" end')
        lines = gen.render().splitlines()
        assert lines[0] == "    0:  str  decl  s"
        assert lines[4] == "    4:       if    8"
        assert lines[6] == '    6:  str  cte   "hi"'
        assert lines[8] == "    8:       end"

    def test_relational_mnemonics(self):
        gen = compiler.build("print 1 >= 2 print 1 <= 2")
        mnemonics = [line.split()[1] for line in gen.render().splitlines() if 'cte' not in line]
        assert mnemonics == ['>=', 'print', '<=', 'print']

    def test_render_is_idempotent(self):
        gen = compiler.build("integer i while i < 3 print i i := i + 1 end")
        assert gen.render() == gen.render()
        assert str(gen) == gen.render()
