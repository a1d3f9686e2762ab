"""
Exception hierarchy for the absorbingLP library.

All errors raised by the library derive from PropagationError, so callers can
catch every library-specific failure with a single except clause. Subclasses
separate caller-input problems (ValidationError, ConfigurationError) from
failures of the numerical work itself (ComputationError) and from problems
converting external graph objects (GraphConstructionError).
"""

from typing import Dict, Any, Optional, List, Union


def _summarize(value: Any) -> str:
    """Render a detail value, abbreviating long index lists."""
    if isinstance(value, (list, dict)) and len(str(value)) > 100:
        return f"<{type(value).__name__} with {len(value)} items>"
    return str(value)


class PropagationError(Exception):
    """
    Base exception for all absorbingLP errors.

    Parameters
    ----------
    message : str
        Human-readable error message describing what went wrong
    details : Dict[str, Any], optional
        Structured information about the error for programmatic handling
    cause : Exception, optional
        The underlying exception that caused this error
    context : Dict[str, Any], optional
        Information about the operation that failed

    Examples
    --------
    >>> raise PropagationError("Propagation failed")
    >>> raise PropagationError(
    ...     "Invalid graph size",
    ...     details={"rows": 4, "columns": 5}
    ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message
        self.details = details or {}
        self.cause = cause
        self.context = context or {}
        super().__init__(self._render())

        if cause is not None:
            self.__cause__ = cause

    def _render(self) -> str:
        text = self.message
        if self.details:
            text += " (Details: " + ", ".join(
                f"{key}={_summarize(value)}" for key, value in self.details.items()
            ) + ")"
        if self.context:
            text += " (Context: " + ", ".join(
                f"{key}={value}" for key, value in self.context.items()
            ) + ")"
        return text

    def add_context(self, **kwargs: Any) -> 'PropagationError':
        """
        Record where the error surfaced and return the error for re-raising.

        The rendered message is updated to include the new entries.

        Examples
        --------
        >>> raise error.add_context(num_nodes=10, num_classes=2)
        """
        self.context.update(kwargs)
        self.args = (self._render(),)
        return self


class ValidationError(PropagationError):
    """
    Exception raised when input data is malformed.

    Covers shape mismatches, out-of-range node indices or class labels,
    negative edge weights and mismatched lengths of the labeled set. These
    are always reported before any computation begins.

    Parameters
    ----------
    message : str
        Descriptive error message explaining the validation failure
    field : str, optional
        Name of the argument that failed validation
    value : Any, optional
        The invalid value that caused the error
    expected : str, optional
        Description of what was expected
    details : Dict[str, Any], optional
        Additional details about the validation failure

    Examples
    --------
    >>> raise ValidationError("Index out of range", field="train_ind", value=12)
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.field = field
        self.value = value
        self.expected = expected

        enhanced_details = details or {}
        if field is not None:
            enhanced_details["field"] = field
        if value is not None:
            enhanced_details["invalid_value"] = value
        if expected is not None:
            enhanced_details["expected"] = expected

        if field:
            enhanced_message = f"Validation error in field '{field}': {message}"
        else:
            enhanced_message = f"Validation error: {message}"

        super().__init__(enhanced_message, details=enhanced_details, **kwargs)


class GraphConstructionError(PropagationError):
    """
    Exception raised when an external graph object cannot be converted.

    Parameters
    ----------
    message : str
        Description of the conversion error
    graph_type : str, optional
        Type of the source graph (e.g., "directed", "undirected")
    node_count : int, optional
        Number of nodes in the source graph
    edge_count : int, optional
        Number of edges in the source graph
    operation : str, optional
        The conversion step that failed
    """

    def __init__(
        self,
        message: str,
        graph_type: Optional[str] = None,
        node_count: Optional[int] = None,
        edge_count: Optional[int] = None,
        operation: Optional[str] = None,
        **kwargs
    ) -> None:
        self.graph_type = graph_type
        self.node_count = node_count
        self.edge_count = edge_count
        self.operation = operation

        context = {}
        if graph_type:
            context["graph_type"] = graph_type
        if node_count is not None:
            context["node_count"] = node_count
        if edge_count is not None:
            context["edge_count"] = edge_count
        if operation:
            context["operation"] = operation

        super().__init__(message, context=context, **kwargs)


class ConfigurationError(PropagationError):
    """
    Exception raised for out-of-domain option values.

    Parameters
    ----------
    message : str
        Description of the configuration error
    parameter : str, optional
        Name of the problematic option
    value : Any, optional
        The invalid option value
    valid_options : List[Any], optional
        List of accepted values for the option
    function : str, optional
        Name of the function where the error occurred

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "Invalid duplicate policy",
    ...     parameter="duplicates",
    ...     value="ignore",
    ...     valid_options=["merge", "error"]
    ... )
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        value: Optional[Any] = None,
        valid_options: Optional[List[Any]] = None,
        function: Optional[str] = None,
        **kwargs
    ) -> None:
        self.parameter = parameter
        self.value = value
        self.valid_options = valid_options
        self.function = function

        details = kwargs.get('details', {})
        if parameter:
            details["parameter"] = parameter
        if value is not None:
            details["invalid_value"] = value
        if valid_options:
            details["valid_options"] = valid_options
        if function:
            details["function"] = function

        enhanced_message = message
        if parameter and valid_options:
            enhanced_message += f". Valid options for '{parameter}': {valid_options}"

        kwargs["details"] = details
        super().__init__(enhanced_message, **kwargs)


class ComputationError(PropagationError):
    """
    Exception raised when a numerical operation fails.

    Parameters
    ----------
    message : str
        Description of the computational error
    operation : str, optional
        The operation that failed (e.g., "matrix_multiplication")
    error_type : str, optional
        Kind of failure (e.g., "numerical", "memory")
    resource_info : Dict[str, Any], optional
        Sizes of the structures involved when the error occurred

    Examples
    --------
    >>> raise ComputationError(
    ...     "Sparse product failed",
    ...     operation="matrix_multiplication",
    ...     error_type="memory",
    ...     resource_info={"augmented_nodes": 1000002, "num_classes": 2}
    ... )
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_type: Optional[str] = None,
        resource_info: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.operation = operation
        self.error_type = error_type
        self.resource_info = resource_info or {}

        context = {}
        if operation:
            context["operation"] = operation
        if error_type:
            context["error_type"] = error_type

        details = kwargs.get('details', {})
        details.update(self.resource_info)

        kwargs["details"] = details
        kwargs["context"] = context

        super().__init__(message, **kwargs)


def validate_parameter(
    value: Any,
    valid_options: List[Any],
    parameter_name: str,
    function_name: Optional[str] = None
) -> None:
    """
    Raise ConfigurationError unless ``value`` is one of ``valid_options``.
    """
    if value not in valid_options:
        raise ConfigurationError(
            f"Invalid value for parameter '{parameter_name}': {value}",
            parameter=parameter_name,
            value=value,
            valid_options=valid_options,
            function=function_name
        )


def require_positive(
    value: Union[int, float],
    parameter_name: str,
    allow_zero: bool = False
) -> None:
    """
    Validate that a numeric parameter is positive.

    Parameters
    ----------
    value : Union[int, float]
        The numeric value to validate
    parameter_name : str
        Name of the parameter
    allow_zero : bool, default False
        Whether to allow zero values

    Raises
    ------
    ConfigurationError
        If value is not positive (or non-negative if allow_zero=True)
    """
    if allow_zero and value < 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be non-negative, got {value}",
            parameter=parameter_name,
            value=value
        )
    elif not allow_zero and value <= 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be positive, got {value}",
            parameter=parameter_name,
            value=value
        )
