from enum import Enum

from api.i18n.resolve import clamp_lang, translation_tables
from api.services.extraction import (
    DERIVED_FIELDS,
    FIELD_SPECS,
    UNKNOWN,
    FieldSpec,
    extract,
    read_field,
)


class Kind(Enum):
    GENERATOR = 1
    PROJECTOR = 2


class Chart:
    chart_type = Kind.GENERATOR
    inner_authority = "SACRAL"
    profile = "2_4"
    split_definition = "SPLIT"
    defined_centers = ("SACRAL", "G")


class Sparse:
    @property
    def chart_type(self):
        raise RuntimeError("not computed")


class Described:
    def describe(self):
        return {"type": "PROJECTOR", "authority": "SPLENIC"}

    profile = "5_1"


EXPECTED_KEYS = {s.name for s in FIELD_SPECS} | set(DERIVED_FIELDS)


def test_extract_translates_and_derives():
    fields = extract(Chart(), FIELD_SPECS, translation_tables("en"))
    assert fields == {
        "type": "Generator",
        "authority": "Sacral",
        "profile": "2/4",
        "definition": "Split Definition",
        "definedCenters": "Sacral, G Center",
        "strategy": "To Respond",
        "signature": "Satisfaction",
        "notSelfTheme": "Frustration",
    }


def test_extract_is_total_for_opaque_objects():
    for instance in (object(), Sparse(), None, 42):
        fields = extract(instance, FIELD_SPECS, translation_tables("en"))
        assert set(fields) == EXPECTED_KEYS
        assert all(v == UNKNOWN for v in fields.values())


def test_synonym_fallback_order():
    spec = FieldSpec("authority", ("authority", "inner_authority"))

    class Both:
        authority = "EMOTIONAL"
        inner_authority = "SACRAL"

    class Renamed:
        inner_authority = "SPLENIC"

    assert read_field(Both(), spec) == "EMOTIONAL"
    assert read_field(Renamed(), spec) == "SPLENIC"
    assert read_field(object(), spec) == UNKNOWN


def test_describe_mapping_wins():
    fields = extract(Described(), FIELD_SPECS, translation_tables("en"))
    assert fields["type"] == "Projector"
    assert fields["authority"] == "Splenic"
    assert fields["profile"] == "5/1"
    assert fields["strategy"] == "Wait for the Invitation"
    assert fields["definition"] == UNKNOWN


def test_unmapped_values_pass_through():
    class Future:
        chart_type = "QUANTUM_GENERATOR"
        authority = "LUNAR_PLUS"

    fields = extract(Future(), FIELD_SPECS, translation_tables("en"))
    assert fields["type"] == "QUANTUM_GENERATOR"
    assert fields["authority"] == "LUNAR_PLUS"
    assert fields["strategy"] == UNKNOWN


def test_callable_accessors_are_called():
    class Methods:
        def defined_centers(self):
            return ["ROOT"]

    assert extract(Methods(), FIELD_SPECS, {})["definedCenters"] == "ROOT"


def test_chinese_labels():
    fields = extract(Chart(), FIELD_SPECS, translation_tables("zh-CN"))
    assert fields["type"] == "生产者"
    assert fields["strategy"] == "等待回应"
    assert fields["profile"] == "2/4"


def test_clamp_lang():
    assert clamp_lang(None) == "en"
    assert clamp_lang("ZH_tw") == "zh"
    assert clamp_lang("fr") == "en"


class Unprintable:
    def __str__(self):
        raise RuntimeError("no text form")


def test_unprintable_values_fall_through_to_unknown():
    class Hostile:
        chart_type = Unprintable()
        type = "PROJECTOR"
        defined_centers = ["SACRAL", Unprintable()]

        def describe(self):
            return {"authority": Unprintable()}

        inner_authority = "SPLENIC"

    fields = extract(Hostile(), FIELD_SPECS, translation_tables("en"))
    assert set(fields) == EXPECTED_KEYS
    # the next accessor in the allow-list takes over
    assert fields["type"] == "Projector"
    assert fields["authority"] == "Splenic"
    assert fields["definedCenters"] == UNKNOWN
    assert fields["strategy"] == "Wait for the Invitation"
