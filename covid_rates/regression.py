# regression.py
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd
from sklearn.linear_model import LinearRegression

from .errors import InsufficientDataError


@dataclass(frozen=True)
class FittedModel:
    """Recta por el origen: y = slope * x (tasa de letalidad constante)."""
    slope: float
    n_obs: int
    r_squared: float

    def predict(self, x) -> np.ndarray:
        return self.slope * np.asarray(x, dtype=float)


def fit_no_intercept(table: pd.DataFrame,
                     x: str = "cases_per_thousand",
                     y: str = "deaths_per_thousand",
                     predicted: str = "predicted_deaths_per_thousand") -> Tuple[FittedModel, pd.DataFrame]:
    if table.empty:
        raise InsufficientDataError(f"No hay observaciones para ajustar {y} ~ {x}")

    X = table[[x]].to_numpy(dtype=float)
    target = table[y].to_numpy(dtype=float)
    model = LinearRegression(fit_intercept=False).fit(X, target)

    fitted = FittedModel(
        slope=float(model.coef_[0]),
        n_obs=len(table),
        r_squared=float(model.score(X, target)),
    )
    return fitted, table.assign(**{predicted: fitted.predict(table[x])})
