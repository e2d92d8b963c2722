"""
Tests for the deterministic repairs applied to extraction output.
"""
from engine.applier import apply_intervention
from engine.normalizer import normalize_payload
from engine.well_state import create_initial_well_state
from services.extraction_fallbacks import (
    apply_fallbacks,
    detect_complexity,
    ensure_bpp_in_resumen,
    extract_bpp,
    extract_context_ranges,
    extract_injectivity_psi,
    extract_recuperado_texto,
    extract_sopro_block,
    classify_fluido_recuperado,
    guess_fluido,
    infer_total_from_text,
    has_mandatory_events,
    normalize_domain_typos,
    pick_detail,
)

BLOCK = """15/08/1990 Teste de formação TF-2 na zona CPS-01 (1012,0 - 1018,5 m).
Sopro forte durante 10 min.
Recuperado 3,2 m3 de aceite y agua.
IP = 0,126 m3/d/kg/cm2
Int. 1012/1018 m
Assentado PACKER a 1005 m."""


def test_domain_typos():
    assert normalize_domain_typos("BBP a 639 m, PCK, cps 01, Vazão") == "BPP a 639 m, PACKER, CPS-01, VAZAO"


class TestDetail:

    def test_mandatory_events(self):
        assert has_mandatory_events("Canhoneado 561/568 m")
        assert has_mandatory_events("Acidização da zona")
        assert not has_mandatory_events("Limpieza de pozo y cambio de bomba.")

    def test_pressure_survey_alone_is_not_a_test(self):
        assert not has_mandatory_events("Registro de pressão estática com swab")

    def test_explicit_mode_wins(self):
        assert pick_detail("breve", BLOCK) == "breve"
        assert pick_detail("extendido", "nada") == "extendido"

    def test_auto(self):
        assert pick_detail("auto", BLOCK) == "extendido"
        assert pick_detail("auto", "Cambio de bomba.") == "breve"
        assert detect_complexity("Cambio de bomba.") == 0


def test_context_ranges():
    zones, main, packers = extract_context_ranges(BLOCK)
    assert (zones["CPS-01"].desde, zones["CPS-01"].hasta) == (1012.0, 1018.5)
    assert (main[0].desde, main[0].hasta) == (1012.0, 1018.0)
    assert packers == [1005.0]


class TestFillIntervals:

    def test_zone_mention_fills_test_interval(self):
        payload = normalize_payload({"tests": [{"nombre": "TF-2 CPS-01"}]})
        apply_fallbacks(payload, BLOCK)
        iv = payload.tests[0].intervalo
        assert (iv.desde, iv.hasta) == (1012.0, 1018.5)

    def test_injectivity_uses_packer_depth(self):
        payload = normalize_payload({"tests": [{"nombre": "Teste de injetividade"}]})
        apply_fallbacks(payload, BLOCK)
        iv = payload.tests[0].intervalo
        assert (iv.desde, iv.hasta) == (1005.0, 1005.0)

    def test_main_interval_is_last_resort(self):
        payload = normalize_payload({"tests": [{"nombre": "TF-2"}]})
        apply_fallbacks(payload, BLOCK)
        iv = payload.tests[0].intervalo
        assert (iv.desde, iv.hasta) == (1012.0, 1018.0)

    def test_cement_interval_from_zone(self):
        payload = normalize_payload({"cementaciones": [{"tipo": "squeeze", "zona": "CPS 01"}]})
        apply_fallbacks(payload, BLOCK)
        iv = payload.cementaciones[0].intervalo
        assert (iv.desde, iv.hasta) == (1012.0, 1018.5)

    def test_cement_without_any_interval_is_filtered(self):
        payload = normalize_payload({"cementaciones": [{"tipo": "squeeze"}, {"tipo": "bpp", "profundidad": 639}]})
        apply_fallbacks(payload, "Squeeze sin datos de profundidad.")
        assert [c.tipo for c in payload.cementaciones] == ["bpp"]


class TestTestEnrichment:

    def test_recovered_fluid_and_sopro(self):
        payload = normalize_payload({"tests": [{"nombre": "TF-2", "vazao": "IP = 0,126 m3/d/kg/cm2"}]})
        apply_fallbacks(payload, BLOCK)
        t = payload.tests[0]
        assert t.recuperado_texto.startswith("Recuperado 3,2 m3")
        assert t.fluido_recuperado == "óleo y agua"
        assert t.sopro == "Sopro: forte durante 10 min."
        assert t.vazao is None

    def test_model_fluid_terms_are_normalized(self):
        payload = normalize_payload({"tests": [{"nombre": "TF-2", "fluidoRecuperado": "aceite"}]})
        apply_fallbacks(payload, BLOCK)
        assert payload.tests[0].fluido_recuperado == "óleo"

    def test_helpers(self):
        assert extract_recuperado_texto("Nada recuperable aquí") is None
        assert guess_fluido("Recuperou gás e água") == "agua y gas"
        assert extract_sopro_block("Sin flujo ni presión").startswith("flujo")

    def test_injectivity_psi(self):
        text = "Teste de injetividade: coluna 1200 psi, anular 300 psi. Pasta de cimento injetada a 2000 psi."
        assert extract_injectivity_psi(text) == "Coluna 1200 psi; Anular 300 psi"


class TestPerforationFilter:

    def test_perforations_need_a_perforation_verb(self):
        payload = normalize_payload({"punzados": [{"desde": 1012, "hasta": 1018}]})
        apply_fallbacks(payload, BLOCK)
        assert payload.punzados == []

    def test_perforations_kept_with_verb(self):
        payload = normalize_payload({"punzados": [{"desde": 561, "hasta": 568}]})
        apply_fallbacks(payload, "Canhoneado o intervalo 561/568 m.")
        assert len(payload.punzados) == 1


class TestBridgePlug:

    def test_extract_bpp(self):
        assert extract_bpp("Assentado BBP em CPS-01 a 639 m.") == (True, 639.0, "CPS-01")
        assert extract_bpp("Se bajó BPP.") == (True, None, None)
        assert extract_bpp("PACKER a 1005 m.") == (False, None, None)

    def test_resumen_mentions_bpp(self):
        assert ensure_bpp_in_resumen("Se cementó", "BPP a 639 m") == "Se cementó. Se aisló con BPP (a 639 m)."
        assert ensure_bpp_in_resumen("Se colocó BPP.", "BPP a 639 m") == "Se colocó BPP."
        assert ensure_bpp_in_resumen("Sin novedad.", "Cambio de bomba") == "Sin novedad."

    def test_empty_resumen_stays_null(self):
        payload = normalize_payload({"punzados": []})
        apply_fallbacks(payload, "Cambio de bomba.")
        assert payload.resumen is None


class TestFallbackRejections:

    def test_incomplete_squeeze_reaches_the_state(self):
        payload = normalize_payload({"cementaciones": [{"tipo": "squeeze", "intervalo": {"desde": 561}}]})
        apply_fallbacks(payload, "Squeeze na zona a 561 m.")
        assert payload.cementaciones == []

        state = apply_intervention(create_initial_well_state(), payload)
        assert [(r.kind, r.reason) for r in state.rejected] == [("squeeze", "missing interval")]
        assert state.rejected[0].raw["intervalo"]["desde"] == 561

    def test_filtered_perforations_reach_the_state(self):
        payload = normalize_payload({"punzados": [{"desde": 1012, "hasta": 1018}]})
        apply_fallbacks(payload, BLOCK)
        state = apply_intervention(create_initial_well_state(), payload)
        assert state.perforations == []
        assert [r.kind for r in state.rejected] == ["punzado"]
        assert state.rejected[0].raw == {"desde": 1012, "hasta": 1018, "unidad": "m"}


class TestRecoveredTotals:

    def test_total_inferred_from_recovered_text(self):
        payload = normalize_payload({"tests": [{"nombre": "TF-1", "intervalo": {"desde": 561, "hasta": 568}}]})
        apply_fallbacks(payload, "TF-1 no intervalo 561/568 m. Recuperou 12 m3 de óleo.")
        t = payload.tests[0]
        assert (t.total_recuperado.valor, t.total_recuperado.unidad) == (12, "m3")
        assert t.fluido_clasificacion == "oleo"

    def test_reported_total_is_kept(self):
        payload = normalize_payload({"tests": [{"nombre": "TF-2", "totalRecuperado": {"valor": 5, "unidad": "bbl"}}]})
        apply_fallbacks(payload, BLOCK)
        t = payload.tests[0]
        assert (t.total_recuperado.valor, t.total_recuperado.unidad) == (5, "bbl")
        assert t.fluido_clasificacion == "oleo_y_agua"

    def test_reported_classification_is_kept(self):
        payload = normalize_payload({"tests": [{"nombre": "TF-2", "fluidoClasificacion": "agua"}]})
        apply_fallbacks(payload, BLOCK)
        assert payload.tests[0].fluido_clasificacion == "agua"

    def test_infer_total_units(self):
        assert infer_total_from_text("Recuperados 3,5 m³ de agua").unidad == "m3"
        assert infer_total_from_text("Recuperou 40 bbl").valor == 40
        assert infer_total_from_text("Recuperou óleo") is None
        assert infer_total_from_text(None) is None

    def test_classify_fluid(self):
        assert classify_fluido_recuperado("água e óleo") == "agua_y_oleo"
        assert classify_fluido_recuperado("petróleo con gas") == "oleo_y_gas"
        assert classify_fluido_recuperado("gás y agua") == "gas_y_agua"
        assert classify_fluido_recuperado("lodo") == "no_especificado"
        assert classify_fluido_recuperado(None) is None
