"""Cost parameters handed to the graph-cut solver.

The solver builds an integer-weighted graph, so every cost weight is stored
as an integer numerator over one shared ``denominator``. Negative weights
mean "not set yet" until the deriver fills them in.
"""

from enum import Enum

from kzstereo.utilities.arbitrary_types_model import ABaseModel

UNSET = -1


class DataCostKind(str, Enum):
    """Distance used to compare pixel intensities."""
    L1 = "L1"
    L2 = "L2"


class CostParameters(ABaseModel):
    """Integer cost weights and run options for the solver.

    Attributes:
        data_cost: Distance used for the data term
        denominator: Shared scale of lambda1, lambda2 and occlusion_cost
        edge_threshold: Intensity difference above which neighbours are across an edge
        lambda1: Smoothness cost for neighbours not across an edge
        lambda2: Smoothness cost for neighbours across an edge
        occlusion_cost: Cost K of declaring a pixel occluded
        max_iterations: Maximum number of expansion iterations
        randomize_order: Shuffle the label order at each iteration
    """

    data_cost: DataCostKind = DataCostKind.L2
    denominator: int = 1
    edge_threshold: int = 8
    lambda1: int = UNSET
    lambda2: int = UNSET
    occlusion_cost: int = UNSET
    max_iterations: int = 4
    randomize_order: bool = False

    def check_solver_ready(self) -> None:
        """Check the record can be used as final solver input.

        Raises:
            ValueError: If the denominator is not positive or a weight is negative
        """
        if self.denominator < 1:
            raise ValueError(f"Denominator must be >= 1, got {self.denominator}")
        for name in ("lambda1", "lambda2", "occlusion_cost"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")

    def __str__(self) -> str:
        lines = [
            "Cost Parameters:",
            f"  Data cost:      {self.data_cost.value}",
            f"  Denominator:    {self.denominator}",
            f"  Edge threshold: {self.edge_threshold}",
            f"  Lambda1:        {self.lambda1}",
            f"  Lambda2:        {self.lambda2}",
            f"  Occlusion (K):  {self.occlusion_cost}",
            f"  Max iterations: {self.max_iterations}",
            f"  Randomize:      {self.randomize_order}",
        ]
        return "\n".join(lines)


class Lambda(ABaseModel):
    """Master smoothness weight value/denominator.

    Until the reducer runs, ``value`` is expressed in units of the shared
    ``CostParameters.denominator`` and ``denominator`` stays at 1.
    """

    value: int = UNSET
    denominator: int = 1

    @property
    def is_set(self) -> bool:
        return self.value >= 0
