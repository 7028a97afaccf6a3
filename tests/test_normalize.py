import pandas as pd

from equilibro.data.normalize import (
    compose_title, compose_titles, ensure_columns, normalize_price, normalize_prices,
)


def test_price_comma_becomes_point():
    assert normalize_price("1,50") == "1.50"


def test_price_quotes_are_stripped():
    assert normalize_price('"2,00"') == "2.00"


def test_price_only_first_comma_is_replaced():
    assert normalize_price("1,234,5") == "1.234,5"


def test_price_non_numeric_passes_through():
    assert normalize_price("n/d") == "n/d"


def test_title_nd_subtitle_is_ignored():
    assert compose_title("X", "ND") == "X"


def test_title_with_subtitle():
    assert compose_title("X", "Y") == "X - Y"


def test_title_commas_become_dashes():
    assert compose_title("A,B", "ND") == "A-B"
    assert compose_title("A", "B,C") == "A - B-C"


def test_title_blank_subtitle():
    assert compose_title("X", "") == "X"
    assert compose_title("X", None) == "X"


def test_vectorized_rules_match_scalar_rules():
    titles = pd.Series(["X", "X", "A,B", "Q"])
    subtitles = pd.Series(["ND", "Y", "ND", ""])
    assert compose_titles(titles, subtitles).tolist() == ["X", "X - Y", "A-B", "Q"]

    prices = pd.Series(["1,50", '"2,00"', "abc", "3"])
    assert normalize_prices(prices).tolist() == ["1.50", "2.00", "abc", "3"]


def test_ensure_columns_adds_blanks_and_clears_nan():
    df = pd.DataFrame({"A": ["1", None]})
    out = ensure_columns(df, ["A", "B"])
    assert out["A"].tolist() == ["1", ""]
    assert out["B"].tolist() == ["", ""]
    assert "B" not in df.columns
