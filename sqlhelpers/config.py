"""Statement building configuration."""

from typing import Any, Final

__all__ = ("DEFAULT_CONFIG", "StatementConfig")

STATEMENT_CONFIG_SLOTS: Final = ("always_quote_identifiers", "log_statements", "validate_parameters")


class StatementConfig:
    """Options shared by the statement builder and the helper facade.

    Instances are immutable; use :meth:`replace` to derive a modified copy.
    """

    __slots__ = STATEMENT_CONFIG_SLOTS

    always_quote_identifiers: bool
    log_statements: bool
    validate_parameters: bool

    def __init__(
        self, always_quote_identifiers: bool = False, log_statements: bool = False, validate_parameters: bool = True
    ) -> None:
        """Initialize the configuration.

        Args:
            always_quote_identifiers: Quote every identifier, not only those SQLite requires quoting (default: False)
            log_statements: Emit a debug log record for every built statement (default: False)
            validate_parameters: Reconcile placeholders against parameters on every build (default: True)
        """
        object.__setattr__(self, "always_quote_identifiers", always_quote_identifiers)
        object.__setattr__(self, "log_statements", log_statements)
        object.__setattr__(self, "validate_parameters", validate_parameters)

    def __setattr__(self, name: str, value: Any) -> None:
        msg = f"{type(self).__name__} is immutable; use replace()"
        raise AttributeError(msg)

    def replace(self, **kwargs: Any) -> "StatementConfig":
        """Immutable update pattern.

        Args:
            **kwargs: Attributes to update

        Raises:
            TypeError: If a keyword is not a configuration field.

        Returns:
            New StatementConfig instance with updated attributes
        """
        for key in kwargs:
            if key not in STATEMENT_CONFIG_SLOTS:
                msg = f"{key!r} is not a field in {type(self).__name__}"
                raise TypeError(msg)
        current_kwargs = {slot: getattr(self, slot) for slot in STATEMENT_CONFIG_SLOTS}
        current_kwargs.update(kwargs)
        return type(self)(**current_kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatementConfig):
            return NotImplemented
        return all(getattr(self, slot) == getattr(other, slot) for slot in STATEMENT_CONFIG_SLOTS)

    def __hash__(self) -> int:
        return hash(tuple(getattr(self, slot) for slot in STATEMENT_CONFIG_SLOTS))

    def __repr__(self) -> str:
        fields = ", ".join(f"{slot}={getattr(self, slot)!r}" for slot in STATEMENT_CONFIG_SLOTS)
        return f"{type(self).__name__}({fields})"


DEFAULT_CONFIG: Final = StatementConfig()
