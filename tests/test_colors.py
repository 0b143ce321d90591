import pytest

from dashboard.colors import NO_DATA_COLOR, PARTY_COLORS, ColorResolver, resolve_color


@pytest.mark.parametrize("party, color", [("UPND", "#e74c3c"), ("PF", "#27ae60"), ("3RD LM", "#95a5a6")])
def test_known_parties(party, color):
    assert resolve_color(party) == color


@pytest.mark.parametrize("label", ["", "   ", "UNKNOWN PARTY", None, 42, ["UPND"]])
def test_resolver_is_total(label):
    assert resolve_color(label) == NO_DATA_COLOR


def test_case_insensitive_fallback():
    assert resolve_color("Independent") == PARTY_COLORS["INDEPENDENT"]


def test_custom_palette_and_no_data_color():
    resolver = ColorResolver(palette={"ABC": "#000000"}, no_data_color="#ffffff")
    assert resolver("ABC") == "#000000"
    assert resolver("UPND") == "#ffffff"


def test_legend_ends_with_no_data():
    legend = ColorResolver().legend()
    assert legend[0] == ("UPND", "#e74c3c")
    assert ("Independent", "#bdc3c7") in legend
    assert legend[-1] == ("No Data", NO_DATA_COLOR)
    assert all(label != "OTHER" for label, _ in legend)
