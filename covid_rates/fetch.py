# fetch.py
import io
from typing import Iterable, List, Sequence

import pandas as pd
import requests
from dagster import get_dagster_logger

from .constants import REQUEST_TIMEOUT
from .errors import FetchError, SchemaError


def fetch_table(url: str, required_columns: Sequence[str] = (), timeout: float = REQUEST_TIMEOUT) -> pd.DataFrame:
    """Descarga un CSV y lo devuelve tal como llega.

    Cualquier fallo de red, HTTP o de parseo lanza FetchError. No hay reintentos
    ni copia local: una descarga fallida detiene la corrida.
    """
    log = get_dagster_logger()
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(url, str(e)) from e

    try:
        df = pd.read_csv(io.StringIO(resp.text))
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise FetchError(url, f"el contenido no es CSV ({e})") from e

    faltantes = [c for c in required_columns if c not in df.columns]
    if faltantes:
        raise SchemaError(url, faltantes)

    log.info(f"Descargado {url}: {len(df)} filas, {len(df.columns)} columnas")
    return df


def fetch_tables(urls: Iterable[str]) -> List[pd.DataFrame]:
    return [fetch_table(url) for url in urls]
