# assets.py
import pandas as pd
from dagster import (
    asset, AssetCheckResult, asset_check, AssetExecutionContext, AssetIn,
    AssetCheckExecutionContext, AssetCheckSeverity, MetadataValue
)

from .constants import (
    US_CASES_URL, US_DEATHS_URL, GLOBAL_CASES_URL, GLOBAL_DEATHS_URL, LOOKUP_URL,
    US_ID_COLUMNS, US_DEATHS_ID_COLUMNS, GLOBAL_ID_COLUMNS, LOOKUP_COLUMNS,
    EXCLUDED_CASE_COUNTRIES, NOISE_FLOOR, RANK_SIZE
)
from .fetch import fetch_table
from .joins import join_global, join_us, unmatched_countries
from .metrics import add_per_thousand, rank_all, ranking_problems
from .regression import fit_no_intercept
from .series import build_chart_series
from .tidy import tidy_series


def _fechas(df: pd.DataFrame) -> str:
    if df.empty:
        return "sin datos"
    return f"{df['date'].min().date()} a {df['date'].max().date()}"

# ------------------ DESCARGAS ------------------

@asset
def raw_us_cases(context: AssetExecutionContext) -> pd.DataFrame:
    df = fetch_table(US_CASES_URL, required_columns=US_ID_COLUMNS)
    context.log.info(f"Casos EE.UU.: {len(df)} jurisdicciones")
    return df

@asset
def raw_us_deaths(context: AssetExecutionContext) -> pd.DataFrame:
    df = fetch_table(US_DEATHS_URL, required_columns=US_DEATHS_ID_COLUMNS)
    context.log.info(f"Muertes EE.UU.: {len(df)} jurisdicciones")
    return df

@asset
def raw_global_cases(context: AssetExecutionContext) -> pd.DataFrame:
    df = fetch_table(GLOBAL_CASES_URL, required_columns=GLOBAL_ID_COLUMNS)
    context.log.info(f"Casos globales: {len(df)} filas")
    return df

@asset
def raw_global_deaths(context: AssetExecutionContext) -> pd.DataFrame:
    df = fetch_table(GLOBAL_DEATHS_URL, required_columns=GLOBAL_ID_COLUMNS)
    context.log.info(f"Muertes globales: {len(df)} filas")
    return df

@asset
def population_lookup(context: AssetExecutionContext) -> pd.DataFrame:
    df = fetch_table(LOOKUP_URL, required_columns=LOOKUP_COLUMNS)
    context.log.info(f"Lookup de población: {len(df)} entradas")
    return df

# ------------------ FORMATO LARGO ------------------

@asset
def us_cases_long(context: AssetExecutionContext, raw_us_cases: pd.DataFrame) -> pd.DataFrame:
    df = tidy_series(raw_us_cases, ["Country_Region"], "cases")
    context.add_output_metadata({"filas": MetadataValue.int(len(df)), "fechas": MetadataValue.text(_fechas(df))})
    return df

@asset
def us_deaths_long(context: AssetExecutionContext, raw_us_deaths: pd.DataFrame) -> pd.DataFrame:
    # La población solo viene en la tabla de muertes; se suma por fecha junto con las muertes
    df = tidy_series(raw_us_deaths, ["Country_Region", "Population"], "deaths", extra_values=["population"])
    context.add_output_metadata({"filas": MetadataValue.int(len(df)), "fechas": MetadataValue.text(_fechas(df))})
    return df

@asset
def global_cases_long(context: AssetExecutionContext, raw_global_cases: pd.DataFrame) -> pd.DataFrame:
    df = tidy_series(raw_global_cases, ["Country/Region"], "cases", keys=["country"],
                     exclude=EXCLUDED_CASE_COUNTRIES)
    context.add_output_metadata({
        "filas": MetadataValue.int(len(df)),
        "paises": MetadataValue.int(df["country"].nunique()),
        "excluidos": MetadataValue.json(sorted(EXCLUDED_CASE_COUNTRIES))
    })
    return df

@asset
def global_deaths_long(context: AssetExecutionContext, raw_global_deaths: pd.DataFrame) -> pd.DataFrame:
    df = tidy_series(raw_global_deaths, ["Country/Region"], "deaths", keys=["country"])
    context.add_output_metadata({
        "filas": MetadataValue.int(len(df)),
        "paises": MetadataValue.int(df["country"].nunique())
    })
    return df

# ------------------ UNIONES ------------------

@asset
def us_daily(context: AssetExecutionContext, us_cases_long: pd.DataFrame, us_deaths_long: pd.DataFrame) -> pd.DataFrame:
    df = join_us(us_cases_long, us_deaths_long)
    context.add_output_metadata({"filas": MetadataValue.int(len(df)), "fechas": MetadataValue.text(_fechas(df))})
    return df

@asset
def global_daily(context: AssetExecutionContext, global_cases_long: pd.DataFrame,
                 global_deaths_long: pd.DataFrame, population_lookup: pd.DataFrame) -> pd.DataFrame:
    df = join_global(global_cases_long, global_deaths_long, population_lookup)
    context.add_output_metadata({
        "filas": MetadataValue.int(len(df)),
        "paises": MetadataValue.int(df["country"].nunique()),
        "fechas": MetadataValue.text(_fechas(df))
    })
    return df

# ------------------ MÉTRICAS ------------------

@asset
def us_metrics(context: AssetExecutionContext, us_daily: pd.DataFrame) -> pd.DataFrame:
    df = add_per_thousand(us_daily)
    context.add_output_metadata({"filas": MetadataValue.int(len(df))})
    return df

@asset
def global_metrics(context: AssetExecutionContext, global_daily: pd.DataFrame) -> pd.DataFrame:
    df = add_per_thousand(global_daily)
    context.add_output_metadata({"filas": MetadataValue.int(len(df))})
    return df

@asset
def country_rankings(context: AssetExecutionContext, global_metrics: pd.DataFrame) -> dict:
    rankings = rank_all(global_metrics)
    context.add_output_metadata({
        nombre: MetadataValue.json(ranking["country"].tolist())
        for nombre, ranking in rankings.items()
    })
    return rankings

@asset
def us_death_model(context: AssetExecutionContext, us_metrics: pd.DataFrame) -> pd.DataFrame:
    fitted, df = fit_no_intercept(us_metrics)
    context.log.info(f"Pendiente muertes/casos por mil: {fitted.slope:.6f} (n={fitted.n_obs})")
    context.add_output_metadata({
        "pendiente": MetadataValue.float(fitted.slope),
        "r2": MetadataValue.float(fitted.r_squared),
        "observaciones": MetadataValue.int(fitted.n_obs)
    })
    return df

@asset
def chart_series(context: AssetExecutionContext, us_daily: pd.DataFrame, global_daily: pd.DataFrame,
                 global_metrics: pd.DataFrame, country_rankings: dict,
                 us_death_model: pd.DataFrame) -> dict:
    series = build_chart_series(us_daily, global_daily, global_metrics, country_rankings, us_death_model)
    context.add_output_metadata({
        "series": MetadataValue.json({nombre: int(len(df)) for nombre, df in series.items()})
    })
    return series

# ------------------ CHECKS ------------------

@asset_check(asset=global_cases_long, name="check_paises_excluidos")
def check_paises_excluidos(context: AssetCheckExecutionContext, global_cases_long: pd.DataFrame) -> AssetCheckResult:
    presentes = sorted(set(global_cases_long["country"]) & EXCLUDED_CASE_COUNTRIES)
    passed = len(presentes) == 0
    return AssetCheckResult(
        passed=passed,
        description="Exclusiones aplicadas" if passed else f"Países excluidos presentes: {presentes}",
        severity=AssetCheckSeverity.ERROR,
        metadata={"presentes": MetadataValue.json(presentes)}
    )

@asset_check(asset=global_daily, name="check_unicidad_date_country")
def check_unicidad_date_country(context: AssetCheckExecutionContext, global_daily: pd.DataFrame) -> AssetCheckResult:
    dup = int(global_daily.duplicated(subset=["date", "country"]).sum())
    passed = dup == 0
    return AssetCheckResult(
        passed=passed,
        description="Sin duplicados" if passed else f"{dup} duplicados encontrados",
        severity=AssetCheckSeverity.ERROR,
        metadata={"duplicados": MetadataValue.int(dup)}
    )

@asset_check(
    asset=global_daily,
    name="check_cobertura_lookup",
    additional_ins={"global_deaths_long": AssetIn(), "population_lookup": AssetIn()}
)
def check_cobertura_lookup(context: AssetCheckExecutionContext, global_deaths_long: pd.DataFrame,
                           population_lookup: pd.DataFrame) -> AssetCheckResult:
    faltantes = unmatched_countries(global_deaths_long, population_lookup)
    passed = len(faltantes) == 0
    return AssetCheckResult(
        passed=passed,
        description="Todos los países tienen población" if passed
        else f"{len(faltantes)} países sin población en el lookup",
        severity=AssetCheckSeverity.WARN,
        metadata={"sin_poblacion": MetadataValue.json(faltantes)}
    )


def _poblacion_positiva(df: pd.DataFrame) -> AssetCheckResult:
    neg = int((~(df["population"] > 0)).sum())
    passed = neg == 0
    return AssetCheckResult(
        passed=passed,
        description="Population positiva" if passed else f"{neg} valores no positivos",
        severity=AssetCheckSeverity.ERROR,
        metadata={"filas_afectadas": MetadataValue.int(neg)}
    )

@asset_check(asset=us_metrics, name="check_population_positiva_us")
def check_population_positiva_us(context: AssetCheckExecutionContext, us_metrics: pd.DataFrame) -> AssetCheckResult:
    return _poblacion_positiva(us_metrics)

@asset_check(asset=global_metrics, name="check_population_positiva_global")
def check_population_positiva_global(context: AssetCheckExecutionContext, global_metrics: pd.DataFrame) -> AssetCheckResult:
    return _poblacion_positiva(global_metrics)

@asset_check(asset=country_rankings, name="check_orden_ranking")
def check_orden_ranking(context: AssetCheckExecutionContext,
                        country_rankings: dict) -> AssetCheckResult:
    problemas = ranking_problems(country_rankings)
    passed = len(problemas) == 0
    return AssetCheckResult(
        passed=passed,
        description=f"Rankings ordenados, de hasta {RANK_SIZE} países y sobre {NOISE_FLOOR} por mil" if passed
        else f"Rankings inválidos: {problemas}",
        severity=AssetCheckSeverity.ERROR,
        metadata={"problemas": MetadataValue.json(problemas)}
    )
