"""
Custom exceptions for content schema parsing and evaluation.
"""


class SchemaError(Exception):
    """Base exception for all schema-related errors."""

    pass


class SchemaSyntaxError(SchemaError):
    """Raised when a content config source has invalid syntax."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        location = ""
        if line is not None:
            location = f" at line {line}"
            if column is not None:
                location += f", column {column}"
        super().__init__(f"{message}{location}")


class SchemaParseError(SchemaError):
    """Raised when a parsed module does not have the expected structure."""

    pass


class SchemaEvaluationError(SchemaError):
    """Raised when a schema expression cannot be interpreted."""

    pass
