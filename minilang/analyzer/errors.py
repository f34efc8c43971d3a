"""
Semantic analysis error handling for MiniLang.

Provides error reporting for semantic analysis: scope resolution
errors, array shape and bounds errors, structural errors, and the
non-fatal uninitialized-use warning.

Author: xwest
"""

from typing import Optional, List
from enum import Enum

from ..lexer.tokens import SourceLocation
from ..lexer.errors import Diagnostic
from ..parser.ast_nodes import ASTNode


class SemanticErrorKind(Enum):
    """Categories of semantic problems."""
    UNDECLARED_VARIABLE = "undeclared_variable"
    REDECLARED_VARIABLE = "redeclared_variable"
    TYPE_MISMATCH = "type_mismatch"
    UNINITIALIZED_VARIABLE = "uninitialized_variable"
    INVALID_OPERATION = "invalid_operation"
    INVALID_ARRAY_SIZE = "invalid_array_size"
    NOT_AN_ARRAY = "not_an_array"
    ARRAY_INDEX_OUT_OF_BOUNDS = "array_index_out_of_bounds"
    ARRAY_ASSIGNMENT = "array_assignment"
    SEMANTIC_ERROR = "semantic_error"


class SemanticError(Exception):
    """
    Exception raised when semantic analysis finds a violation.

    The analyzer records these and keeps going; only the symbol table
    actually raises one (on redeclaration).
    """

    def __init__(
        self,
        kind: SemanticErrorKind,
        message: str,
        location: SourceLocation,
        node: Optional[ASTNode] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        related_locations: Optional[List[SourceLocation]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions,
            category=SEMANTIC_ERROR_CODES.get(code)
        )
        self.node = node
        self.related_locations = related_locations or []

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        result = str(self.diagnostic)

        # Add related locations if any
        if self.related_locations:
            result += "Related locations:\n"
            for loc in self.related_locations:
                result += f"  --> {loc}\n"

        return result


class SemanticWarning:
    """
    Represents a semantic warning that doesn't fail analysis.
    """

    def __init__(
        self,
        kind: SemanticErrorKind,
        message: str,
        location: SourceLocation,
        node: Optional[ASTNode] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        self.kind = kind
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            code=code,
            help_text=help_text,
            suggestions=suggestions,
            category=SEMANTIC_ERROR_CODES.get(code)
        )
        self.node = node

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


# Semantic error codes for categorization
SEMANTIC_ERROR_CODES = {
    # Type errors
    "S001": "Type mismatch",

    # Symbol resolution errors
    "S010": "Undeclared variable",
    "S011": "Variable redeclaration",

    # Initialization
    "S020": "Possibly uninitialized variable",

    # Expressions
    "S030": "Invalid operation",

    # Arrays
    "S040": "Invalid array size",
    "S041": "Not an array",
    "S042": "Array index out of bounds",
    "S043": "Assignment to array name",

    # Structure
    "S099": "Malformed syntax tree",
}


# Helper functions for creating specific semantic errors

def create_undeclared_variable_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None,
    similar_names: Optional[List[str]] = None
) -> SemanticError:
    """Create an undeclared variable error."""
    suggestions = []
    if similar_names:
        suggestions.extend([f"Did you mean '{similar}'?" for similar in similar_names[:3]])

    suggestions.extend([
        f"Declare '{name}' before using it",
        "Check that the declaration is not inside a block that has already closed",
    ])

    return SemanticError(
        SemanticErrorKind.UNDECLARED_VARIABLE,
        message=f"Undeclared variable '{name}'",
        location=location,
        node=node,
        code="S010",
        help_text=f"The variable '{name}' is not declared in any enclosing scope.",
        suggestions=suggestions
    )


def create_redeclared_variable_error(
    name: str,
    location: SourceLocation,
    original_location: Optional[SourceLocation] = None,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create a redeclaration error for a name already declared at this level."""
    related_locations = [original_location] if original_location else []
    return SemanticError(
        SemanticErrorKind.REDECLARED_VARIABLE,
        message=f"Variable '{name}' already declared in this scope",
        location=location,
        node=node,
        code="S011",
        help_text="Names may be shadowed in a nested block but not redeclared in the same one.",
        suggestions=[f"Rename one of the '{name}' declarations", "Use assignment instead of a new declaration"],
        related_locations=related_locations
    )


def create_type_mismatch_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create a type mismatch error (an array used as a scalar value)."""
    return SemanticError(
        SemanticErrorKind.TYPE_MISMATCH,
        message=f"Type mismatch involving '{name}'",
        location=location,
        node=node,
        code="S001",
        help_text=f"'{name}' is an array and cannot be used as a single value.",
        suggestions=[f"Select an element, e.g. {name}[0]"]
    )


def create_uninitialized_variable_warning(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticWarning:
    """Create the warning for a read of a variable that was never assigned."""
    return SemanticWarning(
        SemanticErrorKind.UNINITIALIZED_VARIABLE,
        message=f"Variable '{name}' may be used uninitialized",
        location=location,
        node=node,
        code="S020",
        help_text=f"No value has been assigned to '{name}' before this point.",
        suggestions=[f"Initialize '{name}' in its declaration: int {name} = 0;"]
    )


def create_invalid_operation_error(
    operator: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for an operation with a missing operand."""
    return SemanticError(
        SemanticErrorKind.INVALID_OPERATION,
        message=f"Invalid operation involving '{operator}'",
        location=location,
        node=node,
        code="S030",
        help_text="Every operator needs all of its operands.",
    )


def create_invalid_array_size_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for an array size that is not a positive literal."""
    return SemanticError(
        SemanticErrorKind.INVALID_ARRAY_SIZE,
        message=f"Invalid array size for '{name}'",
        location=location,
        node=node,
        code="S040",
        help_text="Array sizes must be positive integer literals.",
        suggestions=[f"Declare the array with a constant size, e.g. int {name}[10];"]
    )


def create_not_an_array_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for indexing a scalar variable."""
    return SemanticError(
        SemanticErrorKind.NOT_AN_ARRAY,
        message=f"Variable '{name}' is not an array",
        location=location,
        node=node,
        code="S041",
        help_text=f"'{name}' is declared as a scalar and cannot be indexed.",
    )


def create_index_out_of_bounds_error(
    name: str,
    index: int,
    length: int,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for a constant index outside the declared size."""
    return SemanticError(
        SemanticErrorKind.ARRAY_INDEX_OUT_OF_BOUNDS,
        message=f"Array index {index} out of bounds for '{name}'",
        location=location,
        node=node,
        code="S042",
        help_text=f"'{name}' has {length} elements; valid indices are 0 to {length - 1}.",
    )


def create_array_assignment_error(
    name: str,
    location: SourceLocation,
    node: Optional[ASTNode] = None
) -> SemanticError:
    """Create an error for assigning to an array name without an index."""
    return SemanticError(
        SemanticErrorKind.ARRAY_ASSIGNMENT,
        message=f"Cannot assign to array '{name}' directly",
        location=location,
        node=node,
        code="S043",
        help_text="Arrays are assigned one element at a time.",
        suggestions=[f"Assign to an element instead, e.g. {name}[0] = ...;"]
    )


def create_structural_error(
    expected: str,
    node: ASTNode
) -> SemanticError:
    """Create an error for a node of the wrong kind in a checked position."""
    return SemanticError(
        SemanticErrorKind.SEMANTIC_ERROR,
        message=f"Malformed syntax tree: expected {expected}, found {node.node_type.value}",
        location=node.location,
        node=node,
        code="S099",
    )
