import math
from enum import Enum

from nu_xsec.utils.errors import ConfigurationError


class KineVar(Enum):
    X = "x"
    Y = "y"
    Q2 = "Q2"
    W = "W"


def xy_to_wq2(E, M, x, y):
    """
    (x, y) -> (W, Q2) for a target of mass M at rest hit by a probe of energy E.

        Q2  = 2 M E x y
        W^2 = M^2 + 2 M E y (1 - x)

    W is returned as -1 when W^2 < 0 (unphysical point).
    """
    Q2 = 2.0 * M * E * x * y
    W2 = M * M + 2.0 * M * E * y * (1.0 - x)
    W = math.sqrt(W2) if W2 >= 0 else -1.0
    return W, Q2


def wq2_to_xy(E, M, W, Q2):
    """Inverse of `xy_to_wq2`. x is returned as -1 when y <= 0 (unphysical point)."""
    y = (W * W - M * M + Q2) / (2.0 * M * E)
    if y <= 0:
        return -1.0, y
    x = Q2 / (2.0 * M * E * y)
    return x, y


def jacobian_dwdq2_dxdy(E, M, x, y):
    """|d(W,Q2)/d(x,y)| = 2 M^2 E^2 y / W, so that d2s/dxdy = |J| d2s/dWdQ2."""
    W, _ = xy_to_wq2(E, M, x, y)
    if W <= 0 or y <= 0:
        return 0.0
    return 2.0 * M * M * E * E * y / W


def jacobian_dxdy_dwdq2(E, M, W, Q2):
    """|d(x,y)/d(W,Q2)| = W / (2 M^2 E^2 y), so that d2s/dWdQ2 = |J| d2s/dxdy."""
    _, y = wq2_to_xy(E, M, W, Q2)
    if W <= 0 or y <= 0:
        return 0.0
    return W / (2.0 * M * M * E * E * y)


def _from_xy(kin, E, M):
    return jacobian_dwdq2_dxdy(E, M, kin.x, kin.y)


def _from_wq2(kin, E, M):
    return jacobian_dxdy_dwdq2(E, M, kin.W, kin.Q2)


def _identity(kin, E, M):
    return 1.0


# (model variables, target density variables) -> factor(kinematics, E, M)
_JACOBIANS = {
    (("W", "Q2"), ("x", "y")): _from_xy,
    (("x", "y"), ("W", "Q2")): _from_wq2,
}


def jacobian_for(model_variables, density_variables):
    """
    Return the factor turning a density in `model_variables` into one in `density_variables`.

    The callable takes (kinematics, E, M). Equal variable tuples map onto
    a unit factor; combinations with no known transformation are rejected.
    """
    model_variables = tuple(model_variables)
    density_variables = tuple(density_variables)
    if model_variables == density_variables:
        return _identity
    try:
        return _JACOBIANS[(model_variables, density_variables)]
    except KeyError:
        raise ConfigurationError(
            f"No Jacobian known to express d/d{model_variables} as d/d{density_variables}"
        ) from None
