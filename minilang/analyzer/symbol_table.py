"""
Symbol table and scope management for MiniLang semantic analysis.

Implements a stack of lexical scopes with support for:
- Shadowing in nested blocks
- Innermost-first name resolution
- Purging a block's declarations when the block closes

Author: xwest
"""

import logging
from typing import Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum

from ..lexer.tokens import SourceLocation
from ..lexer.errors import ErrorRecovery
from ..parser.ast_nodes import ASTNode
from .errors import create_redeclared_variable_error


logger = logging.getLogger(__name__)


class Shape(Enum):
    """Declared shape of a variable."""
    SCALAR = "scalar"
    ARRAY = "array"


@dataclass(frozen=True)
class SymbolType:
    """
    Declared type of a variable.

    MiniLang has a single element type, int; what varies is whether the
    name denotes one value or a fixed-size array. `length` is None for
    scalars and for arrays whose size expression was invalid.
    """
    name: str = "int"
    shape: Shape = Shape.SCALAR
    length: Optional[int] = None

    @classmethod
    def scalar(cls) -> "SymbolType":
        return cls()

    @classmethod
    def array(cls, length: Optional[int]) -> "SymbolType":
        return cls(shape=Shape.ARRAY, length=length)

    @property
    def is_array(self) -> bool:
        return self.shape == Shape.ARRAY

    def __str__(self) -> str:
        if self.is_array:
            return f"{self.name}[{self.length if self.length is not None else '?'}]"
        return self.name


@dataclass
class Symbol:
    """Represents a declared variable."""
    name: str
    symbol_type: SymbolType
    location: SourceLocation
    scope_level: int = 0
    is_initialized: bool = False
    ast_node: Optional[ASTNode] = None

    @property
    def is_array(self) -> bool:
        return self.symbol_type.is_array

    @property
    def line(self) -> int:
        return self.location.line

    def __str__(self) -> str:
        return f"{self.name}: {self.symbol_type}"


class ScopeKind(Enum):
    """Types of scopes."""
    GLOBAL = "global"
    BLOCK = "block"
    IF = "if"
    WHILE = "while"
    REPEAT = "repeat"


@dataclass
class Scope:
    """Represents one lexical scope level."""
    kind: ScopeKind
    level: int
    symbols: Dict[str, Symbol] = field(default_factory=dict)

    def define_symbol(self, symbol: Symbol) -> None:
        """Define a symbol in this scope."""
        if symbol.name in self.symbols:
            existing = self.symbols[symbol.name]
            raise create_redeclared_variable_error(
                symbol.name, symbol.location, existing.location, symbol.ast_node
            )
        self.symbols[symbol.name] = symbol

    def lookup_symbol_local(self, name: str) -> Optional[Symbol]:
        """Look up a symbol only in this scope."""
        return self.symbols.get(name)

    def __str__(self) -> str:
        return f"Scope({self.kind.value}, level {self.level}, {len(self.symbols)} symbols)"


class SymbolTable:
    """
    Manages the scope stack.

    Level 0 is the global scope and is never popped. A name can be
    declared once per level; an inner declaration shadows outer ones until
    its scope exits, at which point every symbol of that level is purged.
    """

    def __init__(self):
        """Initialize the symbol table with a global scope."""
        self.global_scope = Scope(ScopeKind.GLOBAL, 0)
        self.scopes: List[Scope] = [self.global_scope]

    @property
    def current_scope(self) -> Scope:
        return self.scopes[-1]

    @property
    def current_level(self) -> int:
        return self.current_scope.level

    def enter_scope(self, kind: ScopeKind = ScopeKind.BLOCK) -> Scope:
        """Enter a new scope one level deeper."""
        new_scope = Scope(kind, self.current_level + 1)
        self.scopes.append(new_scope)
        logger.debug("Entered %s scope (level %d)", kind.value, new_scope.level)
        return new_scope

    def exit_scope(self) -> Optional[List[Symbol]]:
        """
        Exit the current scope.

        Returns:
            The symbols purged with it, or None if already at global scope
        """
        if len(self.scopes) == 1:
            return None

        old_scope = self.scopes.pop()
        purged = list(old_scope.symbols.values())
        old_scope.symbols.clear()
        logger.debug("Exited %s scope (level %d), purged %d symbols",
                     old_scope.kind.value, old_scope.level, len(purged))
        return purged

    def declare(self, name: str, symbol_type: SymbolType, location: SourceLocation,
                ast_node: Optional[ASTNode] = None, is_initialized: bool = False) -> Symbol:
        """
        Declare a variable in the current scope.

        Raises:
            SemanticError: If the name is already declared at this level
        """
        symbol = Symbol(
            name=name,
            symbol_type=symbol_type,
            location=location,
            scope_level=self.current_level,
            is_initialized=is_initialized,
            ast_node=ast_node
        )
        self.current_scope.define_symbol(symbol)
        return symbol

    def lookup(self, name: str) -> Optional[Symbol]:
        """Look up a name, innermost scope first."""
        for scope in reversed(self.scopes):
            symbol = scope.lookup_symbol_local(name)
            if symbol is not None:
                return symbol
        return None

    def lookup_current_scope(self, name: str) -> Optional[Symbol]:
        return self.current_scope.lookup_symbol_local(name)

    def all_symbols(self) -> Dict[str, Symbol]:
        """Get all visible symbols; inner declarations hide outer ones."""
        result = {}
        for scope in self.scopes:
            result.update(scope.symbols)
        return result

    def similar_names(self, name: str) -> List[str]:
        """Visible names close to `name` (for error suggestions)."""
        return ErrorRecovery.similar_names(name, self.all_symbols().keys())

    def __str__(self) -> str:
        return f"SymbolTable(current: {self.current_scope})"
