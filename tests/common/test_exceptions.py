"""
Tests for the custom exception hierarchy.

This module checks inheritance, message formatting and the contextual
information carried by each exception class.
"""

import pytest

from absorbingLP.common.exceptions import (
    PropagationError,
    ValidationError,
    GraphConstructionError,
    ConfigurationError,
    ComputationError,
    validate_parameter,
    require_positive
)


class TestPropagationError:
    """Test the base PropagationError class."""

    def test_basic_error(self):
        """Test basic error creation."""
        error = PropagationError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.details == {}
        assert error.context == {}
        assert error.cause is None

    def test_error_with_details(self):
        """Details are appended to the message."""
        error = PropagationError("Graph error", details={"rows": 3, "columns": 4})

        assert "rows=3" in str(error)
        assert "columns=4" in str(error)

    def test_long_details_are_summarized(self):
        """Long collections are abbreviated in the message."""
        error = PropagationError("Bad indices", details={"indices": list(range(100))})

        assert "<list with 100 items>" in str(error)

    def test_error_with_context(self):
        """Context is appended to the message."""
        error = PropagationError("Failed", context={"stage": "augmentation"})

        assert "stage=augmentation" in str(error)
        assert error.context == {"stage": "augmentation"}

    def test_error_with_cause(self):
        """The cause is chained."""
        original_error = ValueError("Original problem")
        error = PropagationError("Wrapper error", cause=original_error)

        assert error.cause is original_error
        assert error.__cause__ is original_error

    def test_add_context(self):
        """Context added after creation is kept and rendered."""
        error = PropagationError("Test")
        result = error.add_context(stage="iteration", step=3)

        assert result is error
        assert error.context == {"stage": "iteration", "step": 3}
        assert str(error) == "Test (Context: stage=iteration, step=3)"

    def test_add_context_extends_existing_context(self):
        """New entries are appended after the original ones."""
        error = ComputationError("Product failed", operation="matrix_multiplication")
        error.add_context(num_nodes=4)

        assert "operation=matrix_multiplication, num_nodes=4" in str(error)


class TestSubclasses:
    """Test the specialized exception classes."""

    def test_inheritance(self):
        """Every library error is a PropagationError."""
        for cls in (ValidationError, GraphConstructionError, ConfigurationError, ComputationError):
            assert issubclass(cls, PropagationError)

    def test_validation_error_field(self):
        """The field name is part of the message."""
        error = ValidationError("Index out of range", field="train_ind", value=12, expected="< 10")

        assert "Validation error in field 'train_ind': Index out of range" in str(error)
        assert error.field == "train_ind"
        assert error.details["invalid_value"] == 12
        assert error.details["expected"] == "< 10"

    def test_validation_error_without_field(self):
        """Without a field the generic prefix is used."""
        assert str(ValidationError("Oops")).startswith("Validation error: Oops")

    def test_configuration_error_options(self):
        """Valid options are listed in the message."""
        error = ConfigurationError(
            "Invalid policy",
            parameter="duplicates",
            value="ignore",
            valid_options=["merge", "error"]
        )

        assert "Valid options for 'duplicates': ['merge', 'error']" in str(error)
        assert error.details["invalid_value"] == "ignore"

    def test_computation_error_context(self):
        """Operation and error type go to the context, resources to the details."""
        error = ComputationError(
            "Product failed",
            operation="matrix_multiplication",
            error_type="memory",
            resource_info={"augmented_nodes": 10}
        )

        assert error.context == {"operation": "matrix_multiplication", "error_type": "memory"}
        assert error.details == {"augmented_nodes": 10}

    def test_graph_construction_error_context(self):
        """Graph properties are recorded in the context."""
        error = GraphConstructionError("Empty graph", graph_type="directed", node_count=0)

        assert error.context == {"graph_type": "directed", "node_count": 0}


class TestHelpers:
    """Test the validation helpers."""

    def test_validate_parameter(self):
        """Values outside the options raise ConfigurationError."""
        validate_parameter("merge", ["merge", "error"], "duplicates")

        with pytest.raises(ConfigurationError) as exc_info:
            validate_parameter("skip", ["merge", "error"], "duplicates", "label_propagation")
        assert exc_info.value.function == "label_propagation"

    def test_require_positive(self):
        """Zero is rejected unless explicitly allowed."""
        require_positive(1, "num_iterations")
        require_positive(0, "num_iterations", allow_zero=True)

        with pytest.raises(ConfigurationError):
            require_positive(0, "pseudocount")
        with pytest.raises(ConfigurationError):
            require_positive(-1, "num_iterations", allow_zero=True)
