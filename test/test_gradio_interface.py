"""
Tests для GradioInterface без запуску сервера.

Перевіряються обробники подій: вони повертають те, що Gradio
покаже користувачу, тому інтерфейс не будується.

Запуск: pytest test/test_gradio_interface.py -v
"""

import pytest
from unittest.mock import patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import config
from presidio_analyzer import RecognizerResult
from ui.gradio_interface import GradioInterface, create_interface

PATTERN_ANALYZE = 'recognizers.presidio_patterns.ArtifactPatternRecognizer.analyze'


@pytest.fixture
def interface():
    return create_interface()


@pytest.fixture
def restore_entity_states():
    original = {name: e.enabled for name, e in config.ARTIFACT_ENTITIES.items()}
    yield
    for name, enabled in original.items():
        config.update_entity_state(name, enabled)


class TestAnalyzeText:

    @patch(PATTERN_ANALYZE)
    def test_analyze_text_outputs(self, mock_patterns, interface):
        mock_patterns.return_value = [
            RecognizerResult(entity_type="IPv4", start=5, end=13, score=0.9)
        ]

        display, anonymized, highlighted, result = interface.analyze_text("from 10.0.0.1 ok")

        assert "IPv4" in display
        assert "10.0.0.1" in display
        assert anonymized == "from [IPv4] ok"
        assert highlighted == [("from ", None), ("10.0.0.1", "IPv4"), (" ok", None)]
        assert result.entities_count == 1

    def test_empty_text_shows_hint(self, interface):
        display, anonymized, highlighted, result = interface.analyze_text("")

        assert display.startswith("❌")
        assert "Введіть текст" in display
        assert result is None

    def test_no_enabled_entities(self, interface):
        interface.enabled_entities = set()

        display, anonymized, _, result = interface.analyze_text("10.0.0.1")

        assert "Налаштування" in display
        assert anonymized == "10.0.0.1"
        assert result is None


class TestPatternTester:

    def test_lists_every_match(self, interface):
        output = interface.test_pattern("IP", "10.0.0.1 and ::1")

        assert "2 збіг" in output
        assert "[0:8] '10.0.0.1' via IPv4" in output
        assert "'::1' via IPv6" in output

    def test_no_matches(self, interface):
        assert "збігів немає" in interface.test_pattern("MAC", "nothing")

    def test_unknown_pattern(self, interface):
        assert "Unknown pattern" in interface.test_pattern("NOPE", "text")


class TestSettings:

    def test_update_settings_syncs_config(self, interface, restore_entity_states):
        status = interface.update_settings(["IPv4", "WORD"])

        assert "2" in status
        assert config.get_enabled_entities() == ["IPv4", "WORD"]


class TestFileUpload:

    def test_upload_log(self, interface, tmp_path):
        log_file = tmp_path / "syslog.log"
        log_file.write_text("eth0 up 00:1a:2b:3c:4d:5e   \r\n", encoding='utf-8')

        text, status = interface.process_file_upload(str(log_file))

        assert text == "eth0 up 00:1a:2b:3c:4d:5e"
        assert status.startswith("✅ syslog.log")

    def test_no_file(self, interface):
        assert interface.process_file_upload(None) == ("", "")


class TestExportReport:

    @patch(PATTERN_ANALYZE)
    def test_export_writes_file(self, mock_patterns, interface):
        mock_patterns.return_value = [
            RecognizerResult(entity_type="IPv4", start=5, end=13, score=0.9)
        ]
        *_, result = interface.analyze_text("from 10.0.0.1 ok")

        path, status = interface.export_report(result, "json")

        assert path.endswith(".json")
        assert Path(path).read_text(encoding='utf-8').count("10.0.0.1") == 1
        assert status.startswith("✅")

    def test_export_before_analysis(self, interface):
        path, status = interface.export_report(None, "json")

        assert path is None
        assert "аналіз" in status

    @patch(PATTERN_ANALYZE)
    def test_unknown_format_shown_as_error(self, mock_patterns, interface):
        """Тест: помилка експорту не доходить до Gradio як traceback."""
        mock_patterns.return_value = []
        *_, result = interface.analyze_text("nothing here")

        path, status = interface.export_report(result, "pdf")

        assert path is None
        assert status.startswith("❌")
        assert "Непідтримуваний формат" in status


class TestServerPort:

    def test_requested_port_used_when_free(self, interface, monkeypatch):
        monkeypatch.delenv("GRADIO_SERVER_PORT", raising=False)

        with patch.object(GradioInterface, '_is_port_available', return_value=True):
            assert interface._resolve_server_port("127.0.0.1", 7861) == 7861

    def test_env_port_preferred(self, interface, monkeypatch):
        monkeypatch.setenv("GRADIO_SERVER_PORT", "7865")

        with patch.object(GradioInterface, '_is_port_available', return_value=True):
            assert interface._resolve_server_port("127.0.0.1", 7860) == 7865

    def test_no_free_port(self, interface, monkeypatch):
        monkeypatch.delenv("GRADIO_SERVER_PORT", raising=False)

        with patch.object(GradioInterface, '_is_port_available', return_value=False):
            assert interface._resolve_server_port("127.0.0.1", 7860) is None
