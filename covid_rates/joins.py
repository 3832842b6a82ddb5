# joins.py
from typing import List, Sequence

import pandas as pd
from dagster import get_dagster_logger

from .constants import LOOKUP_COLUMNS, TIDY_NAMES

_KEY = "_join_key"


def normalize_key(values: pd.Series) -> pd.Series:
    """Clave de unión por nombre de país: sin espacios extremos y en minúsculas."""
    return values.astype(str).str.strip().str.casefold()


def _log_unmatched(left: pd.DataFrame, right: pd.DataFrame, on: Sequence[str], label: str) -> None:
    on = list(on)
    lados = left[on].drop_duplicates().merge(
        right[on].drop_duplicates(), on=on, how="outer", indicator=True
    )
    solo_izq = int((lados["_merge"] == "left_only").sum())
    solo_der = int((lados["_merge"] == "right_only").sum())
    if solo_izq or solo_der:
        get_dagster_logger().warning(
            f"{label}: {solo_izq} claves solo a la izquierda y {solo_der} solo a la derecha quedan fuera"
        )


def join_us(cases: pd.DataFrame, deaths: pd.DataFrame) -> pd.DataFrame:
    """Une casos y muertes de EE.UU. por fecha; la población viene de muertes."""
    _log_unmatched(cases, deaths, ["date"], "EE.UU. casos/muertes")
    joined = cases[["date", "cases"]].merge(
        deaths[["date", "deaths", "population"]], on="date", how="inner"
    )
    return joined.sort_values("date", kind="mergesort").reset_index(drop=True)


def prepare_lookup(lookup: pd.DataFrame) -> pd.DataFrame:
    tabla = lookup[LOOKUP_COLUMNS].rename(columns=TIDY_NAMES)
    tabla = tabla.assign(population=pd.to_numeric(tabla["population"], errors="coerce"))
    tabla = tabla[tabla["population"] > 0]
    tabla = tabla.assign(**{_KEY: normalize_key(tabla["combined_key"])})

    repetidas = tabla[_KEY].duplicated()
    if repetidas.any():
        get_dagster_logger().warning(
            f"Lookup: {int(repetidas.sum())} claves repetidas, se conserva la primera"
        )
    tabla = tabla.loc[~repetidas]
    return tabla.astype({"population": "int64"}).reset_index(drop=True)


def unmatched_countries(deaths: pd.DataFrame, lookup: pd.DataFrame) -> List[str]:
    """Países de la serie que no encuentran población en el lookup."""
    return _unmatched(deaths, prepare_lookup(lookup))


def _unmatched(deaths: pd.DataFrame, tabla: pd.DataFrame) -> List[str]:
    claves = set(tabla[_KEY])
    paises = pd.Series(deaths["country"].unique())
    return sorted(paises[~normalize_key(paises).isin(claves)].tolist())


def attach_population(deaths: pd.DataFrame, lookup: pd.DataFrame) -> pd.DataFrame:
    tabla = prepare_lookup(lookup)
    faltantes = _unmatched(deaths, tabla)
    if faltantes:
        get_dagster_logger().warning(f"Sin población en el lookup: {faltantes}")
    keyed = deaths.assign(**{_KEY: normalize_key(deaths["country"])})
    return keyed.merge(tabla[[_KEY, "population"]], on=_KEY, how="inner").drop(columns=_KEY)


def join_global(cases: pd.DataFrame, deaths: pd.DataFrame, lookup: pd.DataFrame) -> pd.DataFrame:
    con_poblacion = attach_population(deaths, lookup)
    _log_unmatched(cases, con_poblacion, ["date", "country"], "Global casos/muertes")
    joined = cases[["date", "country", "cases"]].merge(
        con_poblacion[["date", "country", "deaths", "population"]],
        on=["date", "country"],
        how="inner",
    )
    return joined.sort_values(["date", "country"], kind="mergesort").reset_index(drop=True)
