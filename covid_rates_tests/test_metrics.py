import numpy as np
import pandas as pd
import pytest

from covid_rates.constants import NOISE_FLOOR
from covid_rates.metrics import (
    add_per_thousand, bottom_countries, latest_snapshot, rank_all, ranking_problems, top_countries
)


@pytest.fixture
def daily():
    ultima = pd.Timestamp(2020, 3, 1)
    paises = ["A", "B", "C", "D", "E", "F", "G", "H"]
    cases = [500, 100, 300, 0, 5, 100, 2, 700]
    deaths = [10, 1, 3, 0, 0, 1, 0, 9]
    actual = pd.DataFrame({
        "date": [ultima] * len(paises),
        "country": paises,
        "cases": cases,
        "deaths": deaths,
        "population": [1000] * len(paises),
    })
    anterior = actual.assign(date=pd.Timestamp(2020, 2, 29), cases=10000, deaths=1000)
    return pd.concat([anterior, actual], ignore_index=True)


def test_per_thousand_definition(daily):
    out = add_per_thousand(daily)
    np.testing.assert_allclose(out["cases_per_thousand"], out["cases"] / out["population"] * 1000, atol=1e-9)
    np.testing.assert_allclose(out["deaths_per_thousand"], out["deaths"] / out["population"] * 1000, atol=1e-9)
    assert (out["population"] > 0).all()


def test_per_thousand_drops_zero_and_missing_population():
    table = pd.DataFrame({
        "date": pd.to_datetime(["2020-01-22"] * 3),
        "country": ["A", "B", "C"],
        "cases": [1, 2, 3],
        "deaths": [0, 0, 1],
        "population": [0, np.nan, 100],
    })
    out = add_per_thousand(table)
    assert out["country"].tolist() == ["C"]
    assert out["cases_per_thousand"].tolist() == pytest.approx([30.0])
    assert np.isfinite(out["cases_per_thousand"]).all()


def test_latest_snapshot(daily):
    snapshot = latest_snapshot(daily)
    assert (snapshot["date"] == pd.Timestamp(2020, 3, 1)).all()
    assert len(snapshot) == 8


def test_latest_snapshot_empty():
    empty = pd.DataFrame(columns=["date", "country"])
    assert latest_snapshot(empty).empty


def test_top_countries_sorted_descending(daily):
    snapshot = latest_snapshot(add_per_thousand(daily))
    top = top_countries(snapshot, "cases_per_thousand")

    assert list(top.columns) == ["country", "rate", "population"]
    assert top["country"].tolist() == ["H", "A", "C", "B", "F"]
    assert top["rate"].is_monotonic_decreasing


def test_top_countries_ties_keep_input_order(daily):
    snapshot = latest_snapshot(add_per_thousand(daily))
    top = top_countries(snapshot, "cases_per_thousand", n=5)
    # B y F empatan en 100 por mil; B aparece antes en la entrada
    assert top["country"].tolist()[-2:] == ["B", "F"]


def test_bottom_countries_respect_noise_floor(daily):
    snapshot = latest_snapshot(add_per_thousand(daily))
    bottom = bottom_countries(snapshot, "deaths_per_thousand")

    assert (bottom["rate"] > NOISE_FLOOR).all()
    assert bottom["rate"].is_monotonic_increasing
    assert bottom["country"].tolist() == ["B", "F", "C", "H", "A"]


def test_bottom_countries_fewer_than_five_eligible():
    snapshot = pd.DataFrame({
        "country": ["A", "B", "C"],
        "rate_x": [0.0, 0.01, 0.5],
        "population": [10, 10, 10],
    })
    bottom = bottom_countries(snapshot, "rate_x")
    assert bottom["country"].tolist() == ["C"]


def test_top_length_is_min_of_five_and_rows():
    snapshot = pd.DataFrame({"country": ["A", "B"], "rate_x": [1.0, 2.0], "population": [1, 1]})
    assert len(top_countries(snapshot, "rate_x")) == 2


def test_rank_all_uses_latest_date(daily):
    rankings = rank_all(add_per_thousand(daily))

    assert set(rankings) == {"top_cases", "bottom_cases", "top_deaths", "bottom_deaths"}
    assert rankings["top_deaths"]["country"].tolist() == ["A", "H", "C", "B", "F"]
    assert rankings["bottom_cases"]["country"].tolist() == ["G", "E", "B", "F", "C"]
    assert all(len(r) <= 5 for r in rankings.values())


def test_ranking_problems_accepts_rank_all(daily):
    assert ranking_problems(rank_all(add_per_thousand(daily))) == {}


def test_ranking_problems_flags_broken_rankings():
    def ranking(rates):
        return pd.DataFrame({
            "country": [f"P{i}" for i in range(len(rates))],
            "rate": rates,
            "population": [1000] * len(rates),
        })

    problemas = ranking_problems({
        "top_cases": ranking([1.0, 3.0]),
        "bottom_cases": ranking([0.005, 1.0]),
        "top_deaths": ranking([6.0, 5.0, 4.0, 3.0, 2.0, 1.0]),
        "bottom_deaths": ranking([2.0, 1.0]),
    })

    assert set(problemas) == {"top_cases", "bottom_cases", "top_deaths", "bottom_deaths"}
    assert problemas["top_deaths"] == "6 filas (máximo 5)"
    assert problemas["bottom_cases"] == "tasas iguales o menores a 0.01"
