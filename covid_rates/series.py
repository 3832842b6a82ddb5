# series.py
"""
Series listas para graficar
===========================

El dibujo de los gráficos queda fuera del pipeline. Aquí solo se entregan
tablas largas con columnas ``x``, ``y`` y ``series`` que cualquier librería
de gráficos puede consumir directamente.
"""

from typing import Dict, Iterable

import pandas as pd

SERIES_COLUMNS = ["x", "y", "series"]


def to_series(table: pd.DataFrame, y: str, label: str, x: str = "date") -> pd.DataFrame:
    out = pd.DataFrame({"x": table[x].to_numpy(), "y": table[y].to_numpy()})
    out["series"] = label
    return out.sort_values("x", kind="mergesort").reset_index(drop=True)


def country_series(table: pd.DataFrame, y: str, countries: Iterable[str]) -> pd.DataFrame:
    """Una serie por país, en el orden recibido."""
    partes = [to_series(table[table["country"] == c], y, c) for c in countries]
    if not partes:
        return pd.DataFrame(columns=SERIES_COLUMNS)
    return pd.concat(partes, ignore_index=True)


def global_totals(global_daily: pd.DataFrame) -> pd.DataFrame:
    return global_daily.groupby("date", as_index=False)[["cases", "deaths"]].sum()


def ranked_trajectories(global_metrics: pd.DataFrame, rankings: Dict[str, pd.DataFrame]) -> Dict[str, pd.DataFrame]:
    """Trayectoria completa de la tasa para cada país de cada ranking."""
    tasas = {"cases": "cases_per_thousand", "deaths": "deaths_per_thousand"}
    out = {}
    for nombre, ranking in rankings.items():
        tasa = tasas[nombre.split("_", 1)[1]]
        out[nombre] = country_series(global_metrics, tasa, ranking["country"])
    return out


def fitted_vs_actual(us_model: pd.DataFrame,
                     actual: str = "deaths_per_thousand",
                     predicted: str = "predicted_deaths_per_thousand") -> pd.DataFrame:
    return pd.concat(
        [to_series(us_model, actual, "actual"), to_series(us_model, predicted, "predicted")],
        ignore_index=True,
    )


def build_chart_series(us_daily: pd.DataFrame, global_daily: pd.DataFrame,
                       global_metrics: pd.DataFrame, rankings: Dict[str, pd.DataFrame],
                       us_model: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    totales = global_totals(global_daily)
    series = {
        "us_cases": pd.concat(
            [to_series(us_daily, "cases", "cases"), to_series(us_daily, "deaths", "deaths")],
            ignore_index=True,
        ),
        "global_cases": pd.concat(
            [to_series(totales, "cases", "cases"), to_series(totales, "deaths", "deaths")],
            ignore_index=True,
        ),
        "us_fitted": fitted_vs_actual(us_model),
    }
    series.update(ranked_trajectories(global_metrics, rankings))
    return series
