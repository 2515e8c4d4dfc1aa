#!/usr/bin/env python3
"""
compiler.py
Single-file toolchain for TAL, a small imperative language
(scanner → recursive-descent grammar driver → IR builder with backpatching
→ typed stack-based virtual machine).

The grammar driver never builds a tree: each construct it recognizes is
handed straight to the CodeGenerator, which appends instructions to the
program and resolves jump targets through a control stack.
"""

import argparse
import logging
import re
import sys
from collections import namedtuple
from enum import Enum

logger = logging.getLogger("tal.compiler")
logger.addHandler(logging.NullHandler())

# =====================================================
# ERRORS
# =====================================================
class CompilerError(Exception):
    phase = "Compile"

    def __init__(self, msg, line=None, column=None):
        super().__init__(msg)
        self.msg = msg
        self.line = line
        self.column = column

    def __str__(self):
        if self.line is not None:
            return f"{self.phase} error ({self.line}:{self.column}): {self.msg}"
        return f"{self.phase} error: {self.msg}"

class LexicalError(CompilerError):
    phase = "Lexical"

class ParseError(CompilerError):
    phase = "Syntax"

class DuplicateDeclaration(CompilerError):
    phase = "Semantic"

class UndeclaredVariable(CompilerError):
    phase = "Semantic"

class UnbalancedControlConstruct(CompilerError):
    phase = "Codegen"

class InternalError(CompilerError):
    phase = "Internal"

class NotAnAssignmentTarget(CompilerError):
    phase = "Runtime"

class TypeMismatch(CompilerError):
    phase = "Runtime"

class ArithmeticFault(CompilerError):
    phase = "Runtime"

# =====================================================
# SCANNER
# =====================================================
Token = namedtuple('Token', ['kind', 'text', 'line', 'column'])

class Scanner:
    KEYWORDS = {'declare', 'integer', 'string', 'if', 'else', 'while', 'end', 'print'}
    token_specification = [
        ("COMMENT",   r'//[^\n]*'),
        ("BADNUM",    r'\d+[A-Za-z_]\w*'),
        ("INTVAL",    r'\d+'),
        ("STRVAL",    r'"[^"\n]*"'),
        ("BADSTR",    r'"[^"\n]*'),
        ("ID",        r'[A-Za-z_]\w*'),
        ("REL",       r'==|!=|<>|<=|>=|<|>'),
        ("ASSIGN",    r':=|='),
        ("OR",        r'\|\|'),
        ("AND",       r'&&'),
        ("NEG",       r'!'),
        ("SUM",       r'\+|\-'),
        ("MUL",       r'\*|/'),
        ("LPAR",      r'\('),
        ("RPAR",      r'\)'),
        ("SEMI",      r';'),
        ("NEWLINE",   r'\n'),
        ("SKIP",      r'[ \t\r]+'),
        ("MISMATCH",  r'.'),
    ]
    tok_regex = '|'.join(f'(?P<{n}>{p})' for n, p in token_specification)
    master_re = re.compile(tok_regex)

    def __init__(self, code):
        self.code = code
        self.lineno = 1
        self.line_start = 0
        self._tokens = self._scan()
        self._eof = None

    def _scan(self):
        for mo in self.master_re.finditer(self.code):
            kind = mo.lastgroup
            val = mo.group()
            column = mo.start() - self.line_start + 1
            if kind == "NEWLINE":
                self.lineno += 1
                self.line_start = mo.end()
            elif kind == "SKIP" or kind == "COMMENT":
                pass
            elif kind == "ID":
                if val in Scanner.KEYWORDS:
                    yield Token(val.upper(), val, self.lineno, column)
                else:
                    yield Token('ID', val, self.lineno, column)
            elif kind == "STRVAL":
                yield Token('STRVAL', val[1:-1], self.lineno, column)
            elif kind == "BADNUM":
                raise LexicalError(f"malformed number {val!r}", self.lineno, column)
            elif kind == "BADSTR":
                raise LexicalError("unterminated string literal", self.lineno, column)
            elif kind == "MISMATCH":
                raise LexicalError(f"non-allowed character {val!r}", self.lineno, column)
            else:
                yield Token(kind, val, self.lineno, column)

    def next_token(self):
        """Return the next token; EOF is returned again once input is exhausted."""
        if self._eof is not None:
            return self._eof
        tok = next(self._tokens, None)
        if tok is None:
            self._eof = Token('EOF', '', self.lineno, len(self.code) - self.line_start + 1)
            return self._eof
        return tok

    def tokenize(self):
        tokens = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.kind == 'EOF':
                return tokens

# =====================================================
# SYMBOL TABLE
# =====================================================
class Kind(Enum):
    VOID = 'void'
    INTEGER = 'integer'
    STRING = 'string'
    BOOLEAN = 'boolean'

DEFAULT_VALUES = {Kind.INTEGER: 0, Kind.STRING: ""}

class Variable:
    def __init__(self, name, kind):
        self.name = name
        self.kind = kind
        self.value = DEFAULT_VALUES[kind]

    def __repr__(self):
        return f"Variable({self.name!r}, {self.kind.value}, {self.value!r})"

class SymbolTable:
    """Flat global namespace shared by the builder and the virtual machine."""

    def __init__(self):
        self.variables = {}

    def declare(self, name, kind, line=None, column=None):
        if name in self.variables:
            raise DuplicateDeclaration(f"variable '{name}' already declared", line, column)
        v = Variable(name, kind)
        self.variables[name] = v
        return v

    def lookup(self, name, line=None, column=None):
        v = self.variables.get(name)
        if v is None:
            raise UndeclaredVariable(f"undeclared variable '{name}'", line, column)
        return v

    def reset(self):
        for v in self.variables.values():
            v.value = DEFAULT_VALUES[v.kind]

    def as_dict(self):
        return {name: {'type': v.kind.value, 'value': v.value}
                for name, v in self.variables.items()}

    def __len__(self):
        return len(self.variables)

# =====================================================
# IR
# =====================================================
class Op(Enum):
    DECLARE = 'declare'
    ASSIGN = 'assign'
    PRINT = 'print'
    IF = 'if'
    ELSE = 'else'
    WHILE = 'while'
    GOTO = 'goto'
    END = 'end'
    VARIABLE = 'variable'
    CONSTANT = 'constant'
    ADD = 'add'
    SUB = 'sub'
    NEG = 'neg'
    MUL = 'mul'
    DIV = 'div'
    EQ = 'eq'
    NE = 'ne'
    LT = 'lt'
    LE = 'le'
    GT = 'gt'
    GE = 'ge'
    NOT = 'not'
    OR = 'or'
    AND = 'and'

# operator spellings accepted from the grammar driver
OPERATORS = {
    '+': Op.ADD, '-': Op.SUB, '-1': Op.NEG, '*': Op.MUL, '/': Op.DIV,
    '==': Op.EQ, '!=': Op.NE, '<>': Op.NE,
    '<': Op.LT, '<=': Op.LE, '>': Op.GT, '>=': Op.GE,
    '!': Op.NOT, '||': Op.OR, '&&': Op.AND,
}

MNEMONICS = {
    Op.DECLARE: 'decl', Op.ASSIGN: ':=', Op.PRINT: 'print', Op.IF: 'if',
    Op.ELSE: 'else', Op.WHILE: 'while', Op.GOTO: 'goto', Op.END: 'end',
    Op.VARIABLE: 'var', Op.CONSTANT: 'cte', Op.ADD: '+', Op.SUB: '-',
    Op.NEG: '-1', Op.MUL: '*', Op.DIV: '/', Op.EQ: '==', Op.NE: '<>',
    Op.LT: '<', Op.LE: '<=', Op.GT: '>', Op.GE: '>=', Op.NOT: '!',
    Op.OR: '||', Op.AND: '&&',
}

KIND_TAGS = {Kind.VOID: '     ', Kind.INTEGER: 'int  ', Kind.STRING: 'str  ', Kind.BOOLEAN: 'bool '}

class Instruction:
    """One IR node. At most one of literal, variable and target is set."""

    def __init__(self, index, line, column, op, kind, literal=None, variable=None):
        self.index = index
        self.line = line
        self.column = column
        self.op = op
        self.kind = kind
        self.literal = literal
        self.variable = variable
        self.target = None

    def render(self):
        tag_kind = self.variable.kind if self.variable is not None else self.kind
        text = f"{self.index:5d}:  {KIND_TAGS[tag_kind]}{MNEMONICS[self.op]:<6}"
        if self.variable is not None:
            text += self.variable.name
        elif self.target is not None:
            text += str(self.target)
        elif self.kind == Kind.STRING:
            text += f'"{self.literal}"'
        elif self.kind == Kind.INTEGER:
            text += str(self.literal)
        return text.rstrip()

    def __repr__(self):
        return self.render().strip()

class Program:
    """Arena of instructions; the successor of instruction i is i + 1."""

    def __init__(self):
        self.instructions = []

    def append(self, line, column, op, kind, literal=None, variable=None):
        instr = Instruction(len(self.instructions), line, column, op, kind, literal, variable)
        self.instructions.append(instr)
        logger.debug("emit %r", instr)
        return instr

    def patch(self, index, target):
        self.instructions[index].target = target
        logger.debug("backpatch %d -> %d", index, target)

    def successor(self, index):
        nxt = index + 1
        return nxt if nxt < len(self.instructions) else None

    def render(self):
        return ''.join(instr.render() + '\n' for instr in self.instructions)

    def __getitem__(self, index):
        return self.instructions[index]

    def __len__(self):
        return len(self.instructions)

    def __iter__(self):
        return iter(self.instructions)

# =====================================================
# IR BUILDER
# =====================================================
class CodeGenerator:
    """
    Translates emission calls from the grammar driver into instructions.

    Every call receives the token that closed the construct so that the
    instruction carries its source position. Calls that do not need the
    token's text may omit it and reuse the position of the previous call.
    """

    def __init__(self, symbols=None):
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.program = Program()
        self.control = []
        self.line = None
        self.column = None

    def _at(self, token):
        if token is not None:
            self.line, self.column = token.line, token.column

    def _add(self, op, kind=Kind.VOID, literal=None, variable=None):
        return self.program.append(self.line, self.column, op, kind, literal, variable)

    def _unbalanced(self, msg):
        raise UnbalancedControlConstruct(msg, self.line, self.column)

    def _pop_control(self):
        if not self.control:
            self._unbalanced("'end' without an open 'if' or 'while'")
        return self.control.pop()

    def _is_loop_guard(self):
        return len(self.control) >= 2 and self.program[self.control[-2]].op == Op.WHILE

    # declarations
    def _declare(self, token, kind):
        self._at(token)
        v = self.symbols.declare(token.text, kind, token.line, token.column)
        self._add(Op.DECLARE, kind, variable=v)
        return v

    def declare_integer(self, token):
        return self._declare(token, Kind.INTEGER)

    def declare_string(self, token):
        return self._declare(token, Kind.STRING)

    # operands
    def assignment_target(self, token):
        self._at(token)
        v = self.symbols.lookup(token.text, token.line, token.column)
        self._add(Op.VARIABLE, Kind.VOID, variable=v)

    def expression_variable(self, token):
        self._at(token)
        v = self.symbols.lookup(token.text, token.line, token.column)
        self._add(Op.VARIABLE, v.kind, variable=v)

    def integer_literal(self, token):
        self._at(token)
        self._add(Op.CONSTANT, Kind.INTEGER, literal=int(token.text))

    def string_literal(self, token):
        self._at(token)
        self._add(Op.CONSTANT, Kind.STRING, literal=token.text)

    def operator(self, symbol, token=None):
        op = OPERATORS.get(symbol)
        if op is None:
            raise InternalError(f"unknown operator {symbol!r}", self.line, self.column)
        self._at(token)
        self._add(op)

    # statements
    def assign(self, token=None):
        self._at(token)
        self._add(Op.ASSIGN)

    def print(self, token=None):
        self._at(token)
        self._add(Op.PRINT)

    def if_head(self, token=None):
        self._at(token)
        self.control.append(self._add(Op.IF).index)

    def else_clause(self, token=None):
        self._at(token)
        if not self.control or self.program[self.control[-1]].op != Op.IF:
            self._unbalanced("'else' without a matching 'if'")
        if self._is_loop_guard():
            self._unbalanced("'else' is not allowed in a 'while' loop")
        goto_end = self._add(Op.GOTO)
        else_mark = self._add(Op.ELSE)
        self.program.patch(self.control.pop(), else_mark.index)
        self.control.append(goto_end.index)

    def while_head(self, token=None):
        self._at(token)
        self.control.append(self._add(Op.WHILE).index)

    def block_end(self, token=None):
        self._at(token)
        if not self.control:
            self._unbalanced("'end' without an open 'if' or 'while'")
        if self.program[self.control[-1]].op == Op.WHILE:
            self._unbalanced("'while' loop has no condition")
        loop = self._is_loop_guard()
        goto_start = self._add(Op.GOTO) if loop else None
        end = self._add(Op.END)
        # a false condition lands just after the block
        self.program.patch(self._pop_control(), end.index)
        if loop:
            head = self._pop_control()
            self.program.patch(goto_start.index, head)
            self.program.patch(head, end.index)

    def finish(self):
        if self.control:
            open_instr = self.program[self.control[-1]]
            loop = self._is_loop_guard() or open_instr.op == Op.WHILE
            construct = 'while' if loop else 'if'
            raise UnbalancedControlConstruct(
                f"'{construct}' is not closed with 'end'", open_instr.line, open_instr.column)
        logger.debug("program built: %d instructions, %d variables",
                     len(self.program), len(self.symbols))
        return self.program

    # output
    def render(self):
        return self.program.render()

    def __str__(self):
        return self.render()

    def run(self, sink=None):
        VirtualMachine(self.program, self.symbols, sink).run()

# =====================================================
# VIRTUAL MACHINE
# =====================================================
StackEntry = namedtuple('StackEntry', ['kind', 'value'])

def format_value(kind, value):
    if kind == Kind.BOOLEAN:
        return 'true' if value else 'false'
    return str(value)

def _divide(a, b):
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

INTEGER_OPS = {
    Op.ADD: lambda a, b: a + b,
    Op.SUB: lambda a, b: a - b,
    Op.MUL: lambda a, b: a * b,
    Op.DIV: _divide,
}

RELATIONAL_OPS = {
    Op.EQ: lambda a, b: a == b,
    Op.NE: lambda a, b: a != b,
    Op.LT: lambda a, b: a < b,
    Op.LE: lambda a, b: a <= b,
    Op.GT: lambda a, b: a > b,
    Op.GE: lambda a, b: a >= b,
}

LOGICAL_OPS = {
    Op.OR: lambda a, b: a or b,
    Op.AND: lambda a, b: a and b,
}

class VirtualMachine:
    def __init__(self, program, symbols, sink=None):
        self.program = program
        self.symbols = symbols
        self.sink = sink if sink is not None else print
        self.stack = []

    def push(self, kind, value):
        self.stack.append(StackEntry(kind, value))

    def pop(self, instr):
        if not self.stack:
            raise InternalError("operand stack is empty", instr.line, instr.column)
        return self.stack.pop()

    def check(self, instr, entry, kind):
        if entry.kind != kind:
            raise TypeMismatch(
                f"incompatible types: expected {kind.value}, got {entry.kind.value}",
                instr.line, instr.column)

    def jump(self, instr):
        if instr.target is None:
            raise InternalError(f"unresolved jump at instruction {instr.index}",
                                instr.line, instr.column)
        return instr.target

    def run(self):
        self.stack = []
        self.symbols.reset()
        logger.debug("run: %d instructions", len(self.program))
        pc = 0 if len(self.program) else None
        steps = 0
        while pc is not None:
            pc = self.step(self.program[pc])
            steps += 1
        logger.debug("run finished after %d steps", steps)

    def step(self, instr):
        """Execute one instruction and return the index of the next one."""
        op = instr.op
        nxt = self.program.successor(instr.index)

        if op in (Op.DECLARE, Op.ELSE, Op.WHILE, Op.END):
            return nxt
        if op == Op.ASSIGN:
            value = self.pop(instr)
            dest = self.pop(instr)
            if dest.kind != Kind.VOID:
                raise NotAnAssignmentTarget("not an assignment variable", instr.line, instr.column)
            v = dest.value
            self.check(instr, value, v.kind)
            v.value = value.value
            return nxt
        if op == Op.PRINT:
            value = self.pop(instr)
            if value.kind == Kind.VOID:
                raise TypeMismatch("cannot print an assignment variable", instr.line, instr.column)
            self.sink(format_value(value.kind, value.value))
            return nxt
        if op == Op.VARIABLE:
            v = instr.variable
            if instr.kind == Kind.VOID:
                self.push(Kind.VOID, v)
            else:
                self.push(v.kind, v.value)
            return nxt
        if op == Op.CONSTANT:
            self.push(instr.kind, instr.literal)
            return nxt
        if op == Op.IF:
            cond = self.pop(instr)
            self.check(instr, cond, Kind.BOOLEAN)
            return nxt if cond.value else self.jump(instr)
        if op == Op.GOTO:
            return self.jump(instr)
        if op == Op.NEG:
            a = self.pop(instr)
            self.check(instr, a, Kind.INTEGER)
            self.push(Kind.INTEGER, -a.value)
            return nxt
        if op == Op.NOT:
            a = self.pop(instr)
            self.check(instr, a, Kind.BOOLEAN)
            self.push(Kind.BOOLEAN, not a.value)
            return nxt

        # binary operators: the first pushed operand is below the second
        b = self.pop(instr)
        a = self.pop(instr)
        if op == Op.ADD and Kind.STRING in (a.kind, b.kind) and Kind.VOID not in (a.kind, b.kind):
            self.push(Kind.STRING, format_value(a.kind, a.value) + format_value(b.kind, b.value))
        elif op in INTEGER_OPS:
            self.check(instr, a, Kind.INTEGER)
            self.check(instr, b, Kind.INTEGER)
            if op == Op.DIV and b.value == 0:
                raise ArithmeticFault("division by zero", instr.line, instr.column)
            self.push(Kind.INTEGER, INTEGER_OPS[op](a.value, b.value))
        elif op in RELATIONAL_OPS:
            self.check(instr, a, Kind.INTEGER)
            self.check(instr, b, Kind.INTEGER)
            self.push(Kind.BOOLEAN, RELATIONAL_OPS[op](a.value, b.value))
        elif op in LOGICAL_OPS:
            self.check(instr, a, Kind.BOOLEAN)
            self.check(instr, b, Kind.BOOLEAN)
            self.push(Kind.BOOLEAN, LOGICAL_OPS[op](a.value, b.value))
        else:
            raise InternalError(f"no handler for {op.value}", instr.line, instr.column)
        return nxt

# =====================================================
# GRAMMAR DRIVER (recursive-descent, LL(1) style)
# =====================================================
class Parser:
    # parentheses, unary operators and if/while blocks each count as one level
    MAX_NESTING = 64

    def __init__(self, scanner, gen=None):
        self.scanner = scanner
        self.gen = gen if gen is not None else CodeGenerator()
        self.previous = None
        self.token = scanner.next_token()
        self.depth = 0

    def peek(self):
        return self.token

    def enter(self, tok):
        self.depth += 1
        if self.depth > self.MAX_NESTING:
            raise ParseError("construct nested too deeply", tok.line, tok.column)

    def leave(self):
        self.depth -= 1

    def advance(self):
        self.previous = self.token
        self.token = self.scanner.next_token()
        return self.previous

    def accept(self, kind):
        if self.token.kind == kind:
            self.advance()
            return True
        return False

    def expect(self, kind, msg=None):
        tok = self.token
        if tok.kind == kind:
            return self.advance()
        m = msg or f"expected token {kind} but got {tok.kind}"
        raise ParseError(m, tok.line, tok.column)

    def parse(self):
        self.statements(('EOF',))
        self.expect('EOF')
        self.gen.finish()
        return self.gen

    def statements(self, stop):
        while self.peek().kind not in stop:
            self.statement()

    def statement(self):
        tok = self.peek()
        if tok.kind in ('DECLARE', 'INTEGER', 'STRING'):
            return self.declaration()
        if tok.kind == 'ID':
            return self.assignment()
        if tok.kind == 'PRINT':
            return self.print_statement()
        if tok.kind == 'IF':
            return self.if_statement()
        if tok.kind == 'WHILE':
            return self.while_statement()
        if tok.kind == 'SEMI':
            self.advance()
            return
        raise ParseError(f"unexpected token {tok.kind}", tok.line, tok.column)

    def declaration(self):
        self.accept('DECLARE')
        if self.accept('INTEGER'):
            self.expect('ID', "expected identifier after 'integer'")
            self.gen.declare_integer(self.previous)
        elif self.accept('STRING'):
            self.expect('ID', "expected identifier after 'string'")
            self.gen.declare_string(self.previous)
        else:
            tok = self.peek()
            raise ParseError("expected 'integer' or 'string' after 'declare'", tok.line, tok.column)
        self.accept('SEMI')

    def assignment(self):
        self.advance()  # ID
        self.gen.assignment_target(self.previous)
        self.expect('ASSIGN', "expected ':=' for assignment")
        self.expression()
        self.gen.assign(self.previous)
        self.accept('SEMI')

    def print_statement(self):
        self.advance()  # PRINT
        self.expression()
        self.gen.print(self.previous)
        self.accept('SEMI')

    def if_statement(self):
        self.enter(self.advance())  # IF
        self.expression()
        self.gen.if_head(self.previous)
        self.statements(('ELSE', 'END', 'EOF'))
        if self.accept('ELSE'):
            self.gen.else_clause(self.previous)
            self.statements(('END', 'EOF'))
        self.expect('END', "expected 'end' to close 'if'")
        self.gen.block_end(self.previous)
        self.leave()
        self.accept('SEMI')

    def while_statement(self):
        self.enter(self.advance())  # WHILE
        self.gen.while_head(self.previous)
        self.expression()
        self.gen.if_head(self.previous)
        self.statements(('END', 'EOF'))
        self.expect('END', "expected 'end' to close 'while'")
        self.gen.block_end(self.previous)
        self.leave()
        self.accept('SEMI')

    # Expressions: precedence climbing via separate functions
    def expression(self):
        self.conjunction()
        while self.peek().kind == 'OR':
            op = self.advance()
            self.conjunction()
            self.gen.operator(op.text, op)

    def conjunction(self):
        self.negation()
        while self.peek().kind == 'AND':
            op = self.advance()
            self.negation()
            self.gen.operator(op.text, op)

    def negation(self):
        if self.peek().kind == 'NEG':
            op = self.advance()
            self.enter(op)
            self.negation()
            self.gen.operator(op.text, op)
            self.leave()
        else:
            self.relation()

    def relation(self):
        self.additive()
        if self.peek().kind == 'REL':
            op = self.advance()
            self.additive()
            self.gen.operator(op.text, op)

    def additive(self):
        self.multiplicative()
        while self.peek().kind == 'SUM':
            op = self.advance()
            self.multiplicative()
            self.gen.operator(op.text, op)

    def multiplicative(self):
        self.unary()
        while self.peek().kind == 'MUL':
            op = self.advance()
            self.unary()
            self.gen.operator(op.text, op)

    def unary(self):
        if self.peek().kind == 'SUM' and self.peek().text == '-':
            op = self.advance()
            self.enter(op)
            self.unary()
            self.gen.operator('-1', op)
            self.leave()
            return
        self.primary()

    def primary(self):
        tok = self.peek()
        if tok.kind == 'INTVAL':
            self.advance()
            self.gen.integer_literal(tok)
        elif tok.kind == 'STRVAL':
            self.advance()
            self.gen.string_literal(tok)
        elif tok.kind == 'ID':
            self.advance()
            self.gen.expression_variable(tok)
        elif tok.kind == 'LPAR':
            self.advance()
            self.enter(tok)
            self.expression()
            self.expect('RPAR', "missing closing parenthesis")
            self.leave()
        else:
            raise ParseError(f"unexpected token {tok.kind} in expression", tok.line, tok.column)

# =====================================================
# COMPILER DRIVER
# =====================================================
def build(code):
    """Scan and parse TAL source, returning the finished CodeGenerator."""
    return Parser(Scanner(code)).parse()

def compile_source(code, run=True):
    result = {
        'tokens': [],
        'listing': '',
        'output': [],
        'errors': [],
        'symbol_table': {},
    }

    try:
        result['tokens'] = Scanner(code).tokenize()
        logger.info("scanned %d tokens", len(result['tokens']))

        gen = build(code)
        result['listing'] = gen.render()
        result['symbol_table'] = gen.symbols.as_dict()
        logger.info("generated %d instructions", len(gen.program))

        if run:
            try:
                gen.run(result['output'].append)
            finally:
                result['symbol_table'] = gen.symbols.as_dict()
    except CompilerError as e:
        logger.info("%s", e)
        result['errors'] = [str(e)]

    return result

def main(argv=None):
    ap = argparse.ArgumentParser(prog='talc', description="Compile and run a TAL program.")
    ap.add_argument('source', help="TAL source file")
    ap.add_argument('--tokens', action='store_true', help="print the token stream")
    ap.add_argument('--listing', action='store_true', help="print the generated code")
    ap.add_argument('--no-run', action='store_true', help="do not execute the program")
    ap.add_argument('-v', '--verbose', action='store_true', help="debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(levelname)s: %(message)s")

    try:
        with open(args.source, encoding='utf-8') as f:
            code = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"talc: cannot read {args.source}: {getattr(e, 'strerror', None) or e}", file=sys.stderr)
        return 1

    try:
        if args.tokens:
            for tok in Scanner(code).tokenize():
                if tok.kind != 'EOF':
                    print(f"{tok.line:3d}:{tok.column:<3d} {tok.kind:>7}  {tok.text}")
        gen = build(code)
        if args.listing:
            print("Executable code:\n")
            print(gen.render())
        if not args.no_run:
            if args.listing:
                print("Execution:\n")
            gen.run()
    except CompilerError as e:
        print(e, file=sys.stderr)
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
