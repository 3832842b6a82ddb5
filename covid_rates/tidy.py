# tidy.py
"""
Series anchas -> formato largo
==============================

Las tablas de CSSE traen una columna por fecha. Aquí se convierten a una fila
por (entidad, fecha), se parsean las fechas y se suman las filas repetidas
(por ejemplo las provincias de un mismo país).

Ninguna función modifica la tabla que recibe; siempre devuelven una nueva.
"""

from typing import Iterable, List, Sequence

import pandas as pd
from dagster import get_dagster_logger

from .constants import DATE_FORMAT, SERIES_METADATA_COLUMNS, TIDY_NAMES
from .errors import MalformedDateError


def parse_report_dates(values: Iterable[str]) -> pd.Series:
    """Convierte cadenas "M/D/YY" en fechas; cualquier valor inválido es fatal."""
    raw = pd.Series(list(values), dtype="object")
    parsed = pd.to_datetime(raw, format=DATE_FORMAT, errors="coerce")
    malas = raw[parsed.isna()]
    if len(malas) > 0:
        raise MalformedDateError(sorted({str(v) for v in malas}))
    return parsed


def date_columns(raw: pd.DataFrame, metadata_columns=SERIES_METADATA_COLUMNS) -> List[str]:
    return [c for c in raw.columns if c not in metadata_columns]


def melt_series(raw: pd.DataFrame, id_columns: Sequence[str], value_name: str,
                metadata_columns=SERIES_METADATA_COLUMNS) -> pd.DataFrame:
    fechas = date_columns(raw, metadata_columns)
    parsed = dict(zip(fechas, parse_report_dates(fechas)))

    long = raw[list(id_columns) + fechas].melt(
        id_vars=list(id_columns),
        value_vars=fechas,
        var_name="date",
        value_name=value_name,
    )
    long["date"] = pd.to_datetime(long["date"].map(parsed))
    return long.rename(columns=TIDY_NAMES)


def exclude_countries(long: pd.DataFrame, names: Iterable[str], column: str = "country") -> pd.DataFrame:
    names = set(names)
    mask = long[column].isin(names)
    if mask.any():
        get_dagster_logger().info(
            f"Excluidas {int(mask.sum())} filas de {sorted(names & set(long[column]))}"
        )
    return long.loc[~mask].reset_index(drop=True)


def summarize_series(long: pd.DataFrame, keys: Sequence[str], values: Sequence[str]) -> pd.DataFrame:
    group = ["date"] + list(keys)
    summed = long.groupby(group, as_index=False, sort=True)[list(values)].sum()
    return summed[group + list(values)].reset_index(drop=True)


def tidy_series(raw: pd.DataFrame, id_columns: Sequence[str], value_name: str,
                keys: Sequence[str] = (), extra_values: Sequence[str] = (),
                exclude: Iterable[str] = ()) -> pd.DataFrame:
    """Melt + exclusiones + suma por (fecha, claves).

    `keys` y `extra_values` usan los nombres limpios (``country``,
    ``population``) porque se aplican después del melt.
    """
    long = melt_series(raw, id_columns, value_name)
    exclude = list(exclude)
    if exclude:
        long = exclude_countries(long, exclude)
    return summarize_series(long, keys, [value_name] + list(extra_values))
