"""
Error taxonomy for the regression comparison pipeline.

Every error carries the name of the component that raised it so a failed
run can be traced back to the stage and input that caused it.
"""

from typing import Optional, Sequence


class ShrinkageError(ValueError):
    """Base class for recoverable pipeline errors."""

    component: str = "shrinkage"

    def __init__(self, message: str, component: Optional[str] = None):
        if component is not None:
            self.component = component
        super().__init__(f"[{self.component}] {message}")


class InvalidProportion(ShrinkageError):
    """Train proportion outside the open interval (0, 1)."""

    def __init__(self, proportion: float, component: str = "partition"):
        self.proportion = proportion
        super().__init__(
            f"proportion must be in (0, 1), got {proportion!r}", component
        )


class EmptyInput(ShrinkageError):
    """A table or sequence with no rows."""

    def __init__(self, what: str, component: str):
        self.what = what
        super().__init__(f"{what} is empty", component)


class NonNumericColumn(ShrinkageError):
    """Columns that cannot be coerced to numbers."""

    def __init__(self, columns: Sequence[str], component: str = "design"):
        self.columns = tuple(columns)
        names = ", ".join(repr(c) for c in self.columns)
        super().__init__(f"non-numeric column(s): {names}", component)


class LengthMismatch(ShrinkageError):
    """Two arrays that must line up row by row have different lengths."""

    def __init__(self, left: int, right: int, component: str = "scoring"):
        self.left = left
        self.right = right
        super().__init__(
            f"inputs have different lengths ({left} vs {right})", component
        )


class DegenerateResponse(ShrinkageError):
    """Constant response: R^2 is undefined."""

    def __init__(self, value: float, component: str = "scoring"):
        self.value = value
        super().__init__(
            f"all response values equal {value!r}; R^2 is undefined", component
        )


class NonConvergent(ShrinkageError):
    """Coordinate descent hit its sweep budget before meeting the tolerance."""

    def __init__(
        self,
        lambda_: Optional[float],
        n_iter: int,
        message: Optional[str] = None,
        component: str = "path",
    ):
        self.lambda_ = lambda_
        self.n_iter = n_iter
        if message is None:
            message = (
                f"lambda={lambda_:.6g} did not converge in {n_iter} sweeps"
            )
        super().__init__(message, component)
