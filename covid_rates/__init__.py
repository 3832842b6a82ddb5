from dagster import Definitions
from .assets import (
    raw_us_cases,
    raw_us_deaths,
    raw_global_cases,
    raw_global_deaths,
    population_lookup,
    us_cases_long,
    us_deaths_long,
    global_cases_long,
    global_deaths_long,
    us_daily,
    global_daily,
    us_metrics,
    global_metrics,
    country_rankings,
    us_death_model,
    chart_series,
    check_paises_excluidos,
    check_unicidad_date_country,
    check_cobertura_lookup,
    check_population_positiva_us,
    check_population_positiva_global,
    check_orden_ranking
)

all_assets = [
    raw_us_cases,
    raw_us_deaths,
    raw_global_cases,
    raw_global_deaths,
    population_lookup,
    us_cases_long,
    us_deaths_long,
    global_cases_long,
    global_deaths_long,
    us_daily,
    global_daily,
    us_metrics,
    global_metrics,
    country_rankings,
    us_death_model,
    chart_series
]

all_asset_checks = [
    check_paises_excluidos,
    check_unicidad_date_country,
    check_cobertura_lookup,
    check_population_positiva_us,
    check_population_positiva_global,
    check_orden_ranking
]

defs = Definitions(
    assets=all_assets,
    asset_checks=all_asset_checks
)
