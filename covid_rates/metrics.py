# metrics.py
from typing import Dict

import pandas as pd
from dagster import get_dagster_logger

from .constants import NOISE_FLOOR, PER_THOUSAND, RANK_SIZE

RANK_COLUMNS = ["country", "rate", "population"]


def add_per_thousand(table: pd.DataFrame) -> pd.DataFrame:
    """Agrega cases_per_thousand y deaths_per_thousand.

    Las filas sin población (o con población <= 0) se descartan antes de
    dividir.
    """
    validas = table["population"].notna() & (table["population"] > 0)
    descartadas = int((~validas).sum())
    if descartadas:
        get_dagster_logger().info(f"Descartadas {descartadas} filas sin población")

    out = table.loc[validas].reset_index(drop=True)
    return out.assign(
        cases_per_thousand=out["cases"] / out["population"] * PER_THOUSAND,
        deaths_per_thousand=out["deaths"] / out["population"] * PER_THOUSAND,
    )


def latest_snapshot(table: pd.DataFrame) -> pd.DataFrame:
    if table.empty:
        return table.copy()
    return table.loc[table["date"] == table["date"].max()].reset_index(drop=True)


def _as_ranking(rows: pd.DataFrame, rate: str) -> pd.DataFrame:
    return rows[["country", rate, "population"]].rename(columns={rate: "rate"}).reset_index(drop=True)


def top_countries(snapshot: pd.DataFrame, rate: str, n: int = RANK_SIZE) -> pd.DataFrame:
    # mergesort es estable: los empates conservan el orden de entrada (alfabético por país)
    ordenado = snapshot.sort_values(rate, ascending=False, kind="mergesort")
    return _as_ranking(ordenado.head(n), rate)


def bottom_countries(snapshot: pd.DataFrame, rate: str, n: int = RANK_SIZE,
                     floor: float = NOISE_FLOOR) -> pd.DataFrame:
    elegibles = snapshot[snapshot[rate] > floor]
    ordenado = elegibles.sort_values(rate, ascending=True, kind="mergesort")
    return _as_ranking(ordenado.head(n), rate)


def rank_all(global_metrics: pd.DataFrame, n: int = RANK_SIZE,
             floor: float = NOISE_FLOOR) -> Dict[str, pd.DataFrame]:
    """Los cuatro rankings sobre la última fecha disponible."""
    ultima = latest_snapshot(global_metrics).sort_values("country", kind="mergesort")
    return {
        "top_cases": top_countries(ultima, "cases_per_thousand", n),
        "bottom_cases": bottom_countries(ultima, "cases_per_thousand", n, floor),
        "top_deaths": top_countries(ultima, "deaths_per_thousand", n),
        "bottom_deaths": bottom_countries(ultima, "deaths_per_thousand", n, floor),
    }


def ranking_problems(rankings: Dict[str, pd.DataFrame], n: int = RANK_SIZE,
                     floor: float = NOISE_FLOOR) -> Dict[str, str]:
    """Rankings que no cumplen el contrato: largo, orden y umbral de ruido."""
    problemas = {}
    for nombre, ranking in rankings.items():
        inferior = nombre.startswith("bottom")
        if len(ranking) > n:
            problemas[nombre] = f"{len(ranking)} filas (máximo {n})"
        elif inferior and (ranking["rate"] <= floor).any():
            problemas[nombre] = f"tasas iguales o menores a {floor}"
        elif inferior and not ranking["rate"].is_monotonic_increasing:
            problemas[nombre] = "no está en orden ascendente"
        elif not inferior and not ranking["rate"].is_monotonic_decreasing:
            problemas[nombre] = "no está en orden descendente"
    return problemas
