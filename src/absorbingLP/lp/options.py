"""
Options for partially absorbing label propagation.

PropagationOptions gathers the tunable settings of the propagation engine
into one immutable record. validate() is run once when a propagation call
starts and raises ConfigurationError on the first out-of-domain field.
"""

from dataclasses import dataclass, fields, replace
from numbers import Integral, Real
from typing import Any, Optional
import math
import numpy as np

from ..common.exceptions import (
    ConfigurationError,
    require_positive,
    validate_parameter
)

DUPLICATE_POLICIES = ["merge", "error"]


@dataclass(frozen=True)
class PropagationOptions:
    """
    Settings for label_propagation.

    Parameters
    ----------
    num_iterations : int, default 200
        Number of propagation steps. With 0 the initial beliefs are returned.
    alpha : float, default 1.0
        Absorption strength in [0, 1]. The value 1 is classical label
        propagation: labeled nodes send all of their mass to their label's
        pseudo-node. The value 0 leaves the graph unmodified.
    use_prior : bool, default False
        Use the Dirichlet-smoothed empirical label distribution as the prior
        instead of the uniform distribution.
    pseudocount : float, default 0.1
        Per-class pseudocount of the empirical prior. Only checked and used
        when use_prior is True.
    convergence_threshold : float, optional
        If set, stop early once the largest change of any belief between two
        steps drops below this value. By default exactly num_iterations steps
        are performed.
    duplicates : str, default "merge"
        How repeated entries in train_ind are treated. "merge" averages the
        observed labels of a repeated node, "error" rejects the input.
    """

    num_iterations: int = 200
    alpha: float = 1.0
    use_prior: bool = False
    pseudocount: float = 0.1
    convergence_threshold: Optional[float] = None
    duplicates: str = "merge"

    def validate(self) -> "PropagationOptions":
        """
        Check every field and return the validated options.

        A numpy boolean use_prior is converted to a plain bool in the
        returned copy.

        Raises
        ------
        ConfigurationError
            On the first field outside its domain
        """
        if isinstance(self.num_iterations, bool) or not isinstance(self.num_iterations, Integral):
            raise ConfigurationError(
                f"Parameter 'num_iterations' must be an integer, got {self.num_iterations!r}",
                parameter="num_iterations",
                value=self.num_iterations
            )
        require_positive(self.num_iterations, "num_iterations", allow_zero=True)

        _require_real(self.alpha, "alpha")
        if not 0 <= self.alpha <= 1:
            raise ConfigurationError(
                f"Alpha must be between 0 and 1, got {self.alpha}",
                parameter="alpha",
                value=self.alpha
            )

        if not isinstance(self.use_prior, (bool, np.bool_)):
            raise ConfigurationError(
                f"Parameter 'use_prior' must be a boolean, got {self.use_prior!r}",
                parameter="use_prior",
                value=self.use_prior,
                valid_options=[True, False]
            )

        if self.use_prior:
            _require_real(self.pseudocount, "pseudocount")
            require_positive(self.pseudocount, "pseudocount")

        if self.convergence_threshold is not None:
            _require_real(self.convergence_threshold, "convergence_threshold")
            require_positive(self.convergence_threshold, "convergence_threshold")

        validate_parameter(self.duplicates, DUPLICATE_POLICIES, "duplicates", "PropagationOptions")

        if not isinstance(self.use_prior, bool):
            return replace(self, use_prior=bool(self.use_prior))
        return self

    def with_overrides(self, **overrides: Any) -> "PropagationOptions":
        """
        Return a copy with the given fields replaced.

        Raises
        ------
        ConfigurationError
            If an override does not name a known option
        """
        known = [f.name for f in fields(self)]
        for name in overrides:
            validate_parameter(name, known, "option name", "PropagationOptions.with_overrides")
        return replace(self, **overrides)


def _require_real(value: Any, parameter_name: str) -> None:
    """Reject non-numeric, boolean and non-finite option values."""
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be a finite number, got {value!r}",
            parameter=parameter_name,
            value=value
        )
