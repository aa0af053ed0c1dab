# painel executado pelo harness de testes do próprio streamlit (sem navegador)
from pathlib import Path

from streamlit.testing.v1 import AppTest

APP = str(Path(__file__).resolve().parents[2] / "run.py")


def _labels(at):
    return [m.label for m in at.metric]


def test_auto_refresh_comeca_desligado():
    at = AppTest.from_file(APP, default_timeout=30).run()
    assert not at.exception
    assert at.sidebar.toggle[0].value is False
    assert "Água armazenada" in _labels(at)


def test_rota_da_url_sobrevive_a_sessao_nova():
    at = AppTest.from_file(APP, default_timeout=30)
    at.query_params["route"] = "alerts"
    at.run()
    assert not at.exception
    assert "Em aberto" in _labels(at)
    assert "Água armazenada" not in _labels(at)


def test_rota_desconhecida_cai_na_home():
    at = AppTest.from_file(APP, default_timeout=30)
    at.query_params["route"] = "xyz"
    at.run()
    assert "Água armazenada" in _labels(at)
