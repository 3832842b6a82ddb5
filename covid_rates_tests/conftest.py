import logging

import numpy as np
import pandas as pd
import pytest
from dagster import get_dagster_logger

from covid_rates.constants import (
    US_CASES_URL, US_DEATHS_URL, GLOBAL_CASES_URL, GLOBAL_DEATHS_URL, LOOKUP_URL
)

FECHAS = ["1/22/20", "1/23/20", "1/24/20"]


def _us_ids(admin2, population=None):
    fila = {
        "UID": 84000000, "iso2": "US", "iso3": "USA", "code3": 840, "FIPS": 1.0,
        "Admin2": admin2, "Province_State": "Alabama", "Country_Region": "US",
        "Lat": 32.5, "Long_": -86.6, "Combined_Key": f"{admin2}, Alabama, US",
    }
    if population is not None:
        fila["Population"] = population
    return fila


@pytest.fixture
def raw_us_cases():
    return pd.DataFrame([
        {**_us_ids("A"), "1/22/20": 10, "1/23/20": 20},
        {**_us_ids("B"), "1/22/20": 5, "1/23/20": 7},
    ])


@pytest.fixture
def raw_us_deaths():
    return pd.DataFrame([
        {**_us_ids("A", 100), "1/22/20": 1, "1/23/20": 2},
        {**_us_ids("B", 200), "1/22/20": 0, "1/23/20": 1},
    ])


def _global(rows):
    registros = []
    for provincia, pais, valores in rows:
        fila = {"Province/State": provincia, "Country/Region": pais, "Lat": 0.0, "Long": 0.0}
        fila.update(dict(zip(FECHAS, valores)))
        registros.append(fila)
    return pd.DataFrame(registros)


@pytest.fixture
def raw_global_cases():
    return _global([
        (np.nan, "Alpha", [10, 20, 30]),
        ("P1", "Beta", [1, 2, 3]),
        ("P2", "Beta", [4, 5, 6]),
        (np.nan, "Korea, North", [0, 0, 1]),
        (np.nan, "Gamma", [0, 0, 0]),
    ])


@pytest.fixture
def raw_global_deaths():
    return _global([
        (np.nan, "Alpha", [1, 1, 2]),
        ("P1", "Beta", [0, 0, 1]),
        ("P2", "Beta", [0, 1, 1]),
        (np.nan, "Korea, North", [0, 0, 0]),
        (np.nan, "Gamma", [0, 0, 0]),
    ])


@pytest.fixture
def population_lookup():
    return pd.DataFrame({
        "UID": [1, 2, 3, 4, 5, 6],
        "Province_State": [np.nan, np.nan, np.nan, np.nan, "P1", np.nan],
        "Country_Region": ["Alpha", "Beta", "Gamma", "Korea, North", "Beta", "Delta"],
        "Combined_Key": ["Alpha", "Beta", "Gamma", "Korea, North", "P1, Beta", "Delta"],
        "Population": [1000, 2000, 500, 25000000, 900, np.nan],
    })


@pytest.fixture
def raw_tables(raw_us_cases, raw_us_deaths, raw_global_cases, raw_global_deaths, population_lookup):
    return {
        US_CASES_URL: raw_us_cases,
        US_DEATHS_URL: raw_us_deaths,
        GLOBAL_CASES_URL: raw_global_cases,
        GLOBAL_DEATHS_URL: raw_global_deaths,
        LOOKUP_URL: population_lookup,
    }


@pytest.fixture
def dagster_warnings(caplog):
    logger = get_dagster_logger()
    propagate = logger.propagate
    logger.propagate = False
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.WARNING, logger=logger.name)
    yield caplog
    logger.removeHandler(caplog.handler)
    logger.propagate = propagate
