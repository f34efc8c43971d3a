"""
Abstract Syntax Tree node definitions for MiniLang.

Each node kind is its own class carrying only the fields that make sense
for it (an If has a condition and a body, a BinaryOp has left, operator
and right). Every node keeps the token it was created from for
diagnostics. Statement sequences are ordered lists owned by their Program
or Block; nodes hold no parent links, so the tree is single-owner and
acyclic.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional
from enum import Enum

from ..lexer.tokens import SourceLocation, Token


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROGRAM = "Program"

    # Statements
    VAR_DECL = "VarDecl"
    ARRAY_DECL = "ArrayDecl"
    ASSIGN = "Assign"
    IF = "If"
    WHILE = "While"
    REPEAT_UNTIL = "RepeatUntil"
    PRINT = "Print"
    BLOCK = "Block"

    # Expressions
    BINARY_OP = "BinaryOp"
    FACTORIAL = "Factorial"
    NUMBER = "Number"
    IDENTIFIER = "Identifier"
    ARRAY_ACCESS = "ArrayAccess"


class ASTVisitor(ABC):
    """
    Visitor interface for traversing AST nodes.

    `visit` dispatches to `visit_<NodeClassName>` and falls back to
    `generic_visit` for node kinds the visitor does not handle.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method = getattr(self, f"visit_{type(node).__name__}", None)
        if method is None:
            return self.generic_visit(node)
        return method(node)

    @abstractmethod
    def generic_visit(self, node: 'ASTNode') -> Any:
        """Handle a node without a dedicated visit method."""
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def __init__(self, node_type: ASTNodeType, token: Token):
        self.node_type = node_type
        self.token = token

    @property
    def location(self) -> SourceLocation:
        return self.token.location

    @property
    def line(self) -> int:
        return self.token.location.line

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all non-empty child nodes, in source order."""
        pass

    def walk(self):
        """Yield this node and all descendants, depth first, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.token.location}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(line={self.line})"


def _present(*nodes: Optional[ASTNode]) -> List[ASTNode]:
    return [node for node in nodes if node is not None]


# ============================================================================
# Top-level nodes
# ============================================================================

class Program(ASTNode):
    """Root AST node representing a complete program."""

    def __init__(self, statements: List['Statement'], token: Token):
        super().__init__(ASTNodeType.PROGRAM, token)
        self.statements = statements

    def children(self) -> List[ASTNode]:
        return list(self.statements)


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""
    pass


class Expression(ASTNode):
    """Base class for expressions."""
    pass


class VarDecl(Statement):
    """Scalar declaration: int x; or int x = expr;"""

    def __init__(self, name: str, initializer: Optional[Expression], token: Token):
        super().__init__(ASTNodeType.VAR_DECL, token)
        self.name = name
        self.initializer = initializer

    def children(self) -> List[ASTNode]:
        return _present(self.initializer)


class ArrayDecl(Statement):
    """Array declaration: int a[size];"""

    def __init__(self, name: str, size: Optional[Expression], token: Token):
        super().__init__(ASTNodeType.ARRAY_DECL, token)
        self.name = name
        self.size = size

    def children(self) -> List[ASTNode]:
        return _present(self.size)


class Assign(Statement):
    """Assignment to a variable or array element."""

    def __init__(self, target: Expression, value: Optional[Expression], token: Token):
        super().__init__(ASTNodeType.ASSIGN, token)
        self.target = target
        self.value = value

    def children(self) -> List[ASTNode]:
        return _present(self.target, self.value)


class Block(Statement):
    """Braced statement sequence."""

    def __init__(self, statements: List[Statement], token: Token):
        super().__init__(ASTNodeType.BLOCK, token)
        self.statements = statements

    def children(self) -> List[ASTNode]:
        return list(self.statements)


class If(Statement):
    def __init__(self, condition: Optional[Expression], body: Optional[Block], token: Token):
        super().__init__(ASTNodeType.IF, token)
        self.condition = condition
        self.body = body

    def children(self) -> List[ASTNode]:
        return _present(self.condition, self.body)


class While(Statement):
    def __init__(self, condition: Optional[Expression], body: Optional[Block], token: Token):
        super().__init__(ASTNodeType.WHILE, token)
        self.condition = condition
        self.body = body

    def children(self) -> List[ASTNode]:
        return _present(self.condition, self.body)


class RepeatUntil(Statement):
    """
    repeat { body } until (condition)

    The condition is tested after the body, so the body always runs at
    least once.
    """

    def __init__(self, body: Optional[Block], condition: Optional[Expression], token: Token):
        super().__init__(ASTNodeType.REPEAT_UNTIL, token)
        self.body = body
        self.condition = condition

    def children(self) -> List[ASTNode]:
        return _present(self.body, self.condition)


class Print(Statement):
    def __init__(self, value: Optional[Expression], token: Token):
        super().__init__(ASTNodeType.PRINT, token)
        self.value = value

    def children(self) -> List[ASTNode]:
        return _present(self.value)


# ============================================================================
# Expressions
# ============================================================================

class BinaryOp(Expression):
    """Binary operation; the token is the operator token."""

    def __init__(self, left: Optional[Expression], operator: str,
                 right: Optional[Expression], token: Token):
        super().__init__(ASTNodeType.BINARY_OP, token)
        self.left = left
        self.operator = operator
        self.right = right

    def children(self) -> List[ASTNode]:
        return _present(self.left, self.right)


class Factorial(Expression):
    def __init__(self, operand: Optional[Expression], token: Token):
        super().__init__(ASTNodeType.FACTORIAL, token)
        self.operand = operand

    def children(self) -> List[ASTNode]:
        return _present(self.operand)


class Number(Expression):
    def __init__(self, value: int, token: Token):
        super().__init__(ASTNodeType.NUMBER, token)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []


class Identifier(Expression):
    def __init__(self, name: str, token: Token):
        super().__init__(ASTNodeType.IDENTIFIER, token)
        self.name = name

    def children(self) -> List[ASTNode]:
        return []


class ArrayAccess(Expression):
    """Indexed element: a[index]. The token is the array name."""

    def __init__(self, name: str, index: Optional[Expression], token: Token):
        super().__init__(ASTNodeType.ARRAY_ACCESS, token)
        self.name = name
        self.index = index

    def children(self) -> List[ASTNode]:
        return _present(self.index)


# ============================================================================
# Printing
# ============================================================================

class ASTPrinter(ASTVisitor):
    """
    Render an AST as an indented outline, two spaces per level.

    Example:
        Program
          VarDecl: x
          Assign
            Identifier: x
            BinaryOp: +
              Number: 1
              Number: 2

    Each visit_* method returns the label of one node; the outline is laid
    out with an explicit stack, so long operator chains print without deep
    recursion.
    """

    def __init__(self, indent: str = "  "):
        self.indent = indent

    def print(self, node: ASTNode) -> str:
        lines: List[str] = []
        stack = [(node, 0)]
        while stack:
            current, level = stack.pop()
            lines.append(f"{self.indent * level}{self.visit(current)}")
            stack.extend((child, level + 1) for child in reversed(current.children()))
        return "\n".join(lines)

    def visit_VarDecl(self, node: VarDecl) -> str:
        return f"VarDecl: {node.name}"

    def visit_ArrayDecl(self, node: ArrayDecl) -> str:
        return f"ArrayDecl: {node.name}"

    def visit_BinaryOp(self, node: BinaryOp) -> str:
        return f"BinaryOp: {node.operator}"

    def visit_Number(self, node: Number) -> str:
        return f"Number: {node.value}"

    def visit_Identifier(self, node: Identifier) -> str:
        return f"Identifier: {node.name}"

    def visit_ArrayAccess(self, node: ArrayAccess) -> str:
        return f"ArrayAccess: {node.name}"

    def generic_visit(self, node: ASTNode) -> str:
        return node.node_type.value


def format_ast(node: ASTNode) -> str:
    """Convenience wrapper around ASTPrinter."""
    return ASTPrinter().print(node)
