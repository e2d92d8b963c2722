"""
Normalizer tests: loosely typed model output to tagged records.
"""
import pytest

from engine.normalizer import (
    normalize_payload,
    sanitize_vazao,
    classify_stimulation,
    normalize_cement_type,
    ExtractedInterventionPayload,
)


class TestSanitizeVazao:

    def test_productivity_index_is_not_a_flow_rate(self):
        assert sanitize_vazao("IP = 0,126 m3/d/kg/cm2") is None

    def test_flow_rate_is_kept(self):
        assert sanitize_vazao("Q=1,2 BPM") == "Q=1,2 BPM"

    @pytest.mark.parametrize("text", ["120 m3/d", "35 bbl/d", "Qt= 40", "2 l/s"])
    def test_rate_units(self, text):
        assert sanitize_vazao(text) == text

    @pytest.mark.parametrize("text", [None, "", "   ", "muy bueno", "1500 psi"])
    def test_no_rate_unit(self, text):
        assert sanitize_vazao(text) is None


class TestClassifyStimulation:

    @pytest.mark.parametrize("label,expected", [
        ("Minifratura", "minifractura"),
        ("mini-frac", "minifractura"),
        ("Fractura hidráulica", "fractura"),
        ("fraturamento", "fractura"),
        ("Acidización con HCl 15%", "acidizacion"),
        ("lavado", "acidizacion"),
        (None, "acidizacion"),
    ])
    def test_labels(self, label, expected):
        assert classify_stimulation(label) == expected


def test_cement_type_defaults():
    assert normalize_cement_type("Squeeze") == "squeeze"
    assert normalize_cement_type("tampón cemento") == "tampon_cemento"
    assert normalize_cement_type("BPP") == "bpp"
    assert normalize_cement_type("tapón raro") == "cementacion"
    assert normalize_cement_type(None) == "cementacion"


class TestNormalizePayload:

    def test_non_dict_is_empty(self):
        for raw in (None, "texto", [1, 2], 5):
            payload = normalize_payload(raw)
            assert payload.is_empty()
            assert payload.resumen is None

    def test_non_list_collections_are_empty(self):
        payload = normalize_payload({"punzados": {"desde": 1}, "tests": "x", "cementaciones": None})
        assert payload.is_empty()

    def test_punzado_aliases_and_coercion(self):
        payload = normalize_payload({"punzados": [{"from": "561,0", "to": 568, "unit": "m"}, "basura"]})
        assert len(payload.punzados) == 1
        p = payload.punzados[0]
        assert (p.desde, p.hasta, p.unidad) == (561.0, 568, "m")

    def test_punzado_without_bounds_is_skipped(self):
        payload = normalize_payload({"punzados": [{"desde": None, "hasta": "x"}, {"desde": 500}]})
        assert len(payload.punzados) == 1
        assert payload.punzados[0].hasta is None

    def test_bpp_depth_unit_defaults_to_meters(self):
        payload = normalize_payload({"cementaciones": [{"tipo": "bpp", "profundidad": "639"}]})
        c = payload.cementaciones[0]
        assert c.tipo == "bpp"
        assert c.profundidad == 639.0
        assert c.unidad_profundidad == "m"
        assert c.intervalo is None

    def test_ensayo_fields(self):
        payload = normalize_payload({
            "tests": [{
                "nombre": "TF-1",
                "intervalo": {"desde": "561", "hasta": "568"},
                "totalRecuperado": {"valor": "2,5", "unidad": "m3"},
                "fluidoRecuperado": "óleo",
                "vazao": "IP = 0,126 m3/d/kg/cm2",
                "gradosAPI": "32",
            }]
        })
        t = payload.tests[0]
        assert t.nombre == "TF-1"
        assert (t.intervalo.desde, t.intervalo.hasta) == (561.0, 568.0)
        assert t.total_recuperado.valor == 2.5
        assert t.fluido_recuperado == "óleo"
        assert t.vazao is None
        assert t.grados_api == "32"

    def test_estimulacion_fields(self):
        payload = normalize_payload({
            "estimulaciones": [{"tipo": "Fratura", "fecha": "1990-03-01", "vazao": "Q=1,2 BPM", "presionMedia": "2500 psi"}]
        })
        e = payload.estimulaciones[0]
        assert e.tipo == "fractura"
        assert e.fecha == "1990-03-01"
        assert e.vazao == "Q=1,2 BPM"
        assert e.presion_media == "2500 psi"

    def test_explicit_fecha_wins(self):
        payload = normalize_payload({"fecha": "1999-01-01", "resumen": "x"}, fecha="1982-05-12")
        assert payload.fecha == "1982-05-12"

    def test_round_trip_through_dict(self):
        payload = normalize_payload({
            "resumen": "r",
            "punzados": [{"desde": 561, "hasta": 568}],
            "cementaciones": [{"tipo": "squeeze", "intervalo": {"desde": 561, "hasta": 568}, "zona": "CPS-01"}],
        }, fecha="1982-05-12")
        again = ExtractedInterventionPayload.from_dict(payload.to_dict())
        assert again == payload


class TestNormalizerRejections:

    def test_dropped_items_are_recorded(self):
        payload = normalize_payload({
            "punzados": [{"desde": None, "hasta": None}, {"desde": "x"}, "basura", {"desde": 561, "hasta": 568}],
            "tests": [7],
        })
        assert len(payload.punzados) == 1
        assert [(r.kind, r.reason) for r in payload.rejected] == [
            ("punzado", "missing interval"),
            ("punzado", "missing interval"),
            ("punzado", "not an object"),
            ("test", "not an object"),
        ]
        assert payload.rejected[2].raw == {"value": "basura"}

    def test_rejections_survive_the_stored_payload(self):
        payload = normalize_payload({"punzados": [{"desde": None, "hasta": None}]})
        again = ExtractedInterventionPayload.from_dict(payload.to_dict())
        assert again.rejected == payload.rejected
        assert len(again.rejected) == 1

    def test_fluid_class_must_be_known(self):
        payload = normalize_payload({"tests": [{"fluidoClasificacion": "oleo_y_agua"}, {"fluidoClasificacion": "barro"}]})
        assert [t.fluido_clasificacion for t in payload.tests] == ["oleo_y_agua", None]
