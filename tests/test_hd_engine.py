from datetime import datetime, timezone

import pytest

from src.hd_engine import mandala
from src.hd_engine.chart import Authority, ChartType, Definition, HumanDesignChart
from src.hd_engine.graph import render_bodygraph
from src.hd_engine.interfaces import IEphemerides
from src.hd_engine.modes import EphCalculationMode

WHEN = datetime(1990, 8, 18, 9, 2, tzinfo=timezone.utc)


def lon_of(gate, line=1):
    idx = mandala.GATE_ORDER.index(gate)
    return (mandala.WHEEL_START + idx * mandala.GATE_SPAN + (line - 0.5) * mandala.LINE_SPAN) % 360.0


class FixedEphemerides(IEphemerides):
    """Same activations at every moment; enough to drive the chart rules."""

    def __init__(self, gates, sun_line=1):
        self.positions = {f"Body{i}": lon_of(g) for i, g in enumerate(gates)}
        self.positions["Sun"] = lon_of(gates[0], sun_line)

    def julian_day(self, point_in_time):
        return 2448121.876

    def longitudes(self, jd_ut, mode):
        return dict(self.positions)


def chart_for(*gates, sun_line=1):
    return HumanDesignChart(WHEN, FixedEphemerides(list(gates), sun_line), EphCalculationMode.MOSHIER)


def test_gate_wheel_boundaries():
    assert len(set(mandala.GATE_ORDER)) == 64
    assert mandala.gate_and_line(302.0) == (41, 1)
    assert mandala.gate_and_line(302.0 + mandala.GATE_SPAN) == (19, 1)
    assert mandala.gate_and_line(0.0) == (25, 2)
    assert mandala.gate_and_line(302.0 - 1e-9) == (60, 6)


def test_every_gate_belongs_to_one_center():
    assert sorted(mandala.GATE_CENTER) == list(range(1, 65))
    for a, b in mandala.CHANNELS:
        assert mandala.GATE_CENTER[a] != mandala.GATE_CENTER[b]


@pytest.mark.parametrize(
    "gates, chart_type, authority",
    [
        ((5,), ChartType.REFLECTOR, Authority.LUNAR),
        ((5, 15), ChartType.GENERATOR, Authority.SACRAL),
        ((34, 20), ChartType.MANIFESTING_GENERATOR, Authority.SACRAL),
        ((21, 45), ChartType.MANIFESTOR, Authority.EGO_MANIFESTED),
        ((1, 8), ChartType.PROJECTOR, Authority.SELF_PROJECTED),
        ((47, 64), ChartType.PROJECTOR, Authority.MENTAL),
        ((6, 59), ChartType.GENERATOR, Authority.EMOTIONAL),
    ],
)
def test_type_and_authority(gates, chart_type, authority):
    chart = chart_for(*gates)
    assert chart.chart_type is chart_type
    assert chart.inner_authority is authority


def test_definition_counts_connected_groups():
    assert chart_for(5).split_definition is Definition.NONE
    assert chart_for(5, 15).split_definition is Definition.SINGLE
    assert chart_for(5, 15, 47, 64).split_definition is Definition.SPLIT
    assert chart_for(5, 15, 47, 64, 18, 58).split_definition is Definition.TRIPLE_SPLIT


def test_profile_uses_sun_lines():
    assert chart_for(5, 15, sun_line=3).profile == "3_3"


def test_constructor_rejects_bad_inputs():
    with pytest.raises(ValueError):
        HumanDesignChart(WHEN, None, EphCalculationMode.MOSHIER)
    with pytest.raises(TypeError):
        HumanDesignChart(WHEN, FixedEphemerides([5]), None)
    with pytest.raises(ValueError):
        HumanDesignChart.from_julian_day(0.0, FixedEphemerides([5]), EphCalculationMode.MOSHIER)


def test_from_julian_day_matches_constructor():
    eph = FixedEphemerides([5, 15])
    chart = HumanDesignChart.from_julian_day(2448121.876, eph, EphCalculationMode.SWISS)
    assert chart.chart_type is ChartType.GENERATOR
    assert chart.defined_centers == ("G", "SACRAL")


def test_render_bodygraph_marks_definition():
    svg = render_bodygraph(Chart=chart_for(5, 15))
    assert svg.startswith("<svg")
    assert 'data-channel="5-15"' in svg
    assert 'fill="#e55039" stroke="#555" stroke-width="2" data-center="SACRAL"' in svg
    assert 'fill="#ffffff" stroke="#555" stroke-width="2" data-center="HEAD"' in svg
    assert "<title>GENERATOR</title>" in svg
