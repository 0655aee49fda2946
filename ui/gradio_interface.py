"""
Веб-інтерфейс (Gradio): аналіз тексту або файлу, перевірка окремого
патерну та вибір типів артефактів.

Вся обробка виконується в core; тут тільки форматування для показу.
"""

import logging
import os
import socket
import tempfile
from typing import List, Optional, Tuple

import gradio as gr

from core.config import config
from core.analyzer import ArtifactAnalyzer, AnalysisResult
from core.recognizer import get_recognizer
from recognizers.artifact_patterns import PATTERN_ORDER
from utils.file_handlers import FileHandler, sanitize_text
from utils.file_exporters import FileExporter, ExportFormat, generate_filename

logger = logging.getLogger(__name__)

DEFAULT_LAUNCH_OPTIONS = {
    "server_name": "127.0.0.1",
    "server_port": 7860,
    "share": False,
    "show_error": True,
}
PORT_FALLBACK_RANGE = range(7860, 7870)


class GradioInterface:
    """
    Обробники подій Gradio.

    Вибір типів артефактів живе в екземплярі (enabled_entities) і
    дублюється в глобальний config при збереженні налаштувань.
    """

    def __init__(self):
        self.analyzer = ArtifactAnalyzer()
        self.recognizer = get_recognizer()
        self.config = config

        self.enabled_entities = set(self.config.get_enabled_entities())

        logger.info("GradioInterface initialized")

    @staticmethod
    def _format_error(error: Exception) -> str:
        message = str(error)
        hints = {
            "порожній": "Введіть текст для аналізу",
            "завеликий": f"Максимальний розмір: {config.MAX_TEXT_LENGTH} символів",
        }
        hint = next((h for key, h in hints.items() if key in message.lower()), None)

        return f"❌ Помилка: {message}" + (f"\n\n💡 {hint}" if hint else "")

    # ============ АНАЛІЗ ============

    def analyze_text(
        self,
        text: str
    ) -> Tuple[str, str, List[Tuple[str, Optional[str]]], Optional[AnalysisResult]]:
        """Повертає (звіт, замаскований текст, фрагменти для підсвічування, результат)."""
        try:
            if not self.enabled_entities:
                return (
                    "⚠️ Жоден тип артефактів не активовано.\n"
                    "Перейдіть на вкладку 'Налаштування' і виберіть типи.",
                    text,
                    [(text, None)],
                    None
                )

            result = self.analyzer.analyze(
                text=text,
                entities=sorted(self.enabled_entities),
                conflict_strategy="priority"
            )

            return (
                self._format_entities_display(result),
                result.anonymized_text,
                self._highlight(result),
                result
            )

        except Exception as e:
            logger.error(f"Analysis failed: {e}", exc_info=True)
            return self._format_error(e), "", [], None

    def _format_entities_display(self, result: AnalysisResult) -> str:
        if result.entities_count == 0:
            return "✅ Артефактів не знайдено"

        lines = [f"🔍 Знайдено артефактів: {result.entities_count}", ""]
        for entity_type, fragments in result.entities_by_type().items():
            description = self._get_entity_description(entity_type)
            lines.append(f"📌 {entity_type}: {description} ({len(fragments)})")
            for fragment in fragments:
                lines.append(f"   • {fragment}")
            lines.append("")

        return "\n".join(lines).rstrip()

    @staticmethod
    def _highlight(result: AnalysisResult) -> List[Tuple[str, Optional[str]]]:
        """Розбиває текст на фрагменти для gr.HighlightedText."""
        segments: List[Tuple[str, Optional[str]]] = []
        cursor = 0
        for entity in sorted(result.entities, key=lambda x: x.start):
            if entity.start > cursor:
                segments.append((result.original_text[cursor:entity.start], None))
            segments.append(
                (result.original_text[entity.start:entity.end], entity.entity_type)
            )
            cursor = entity.end
        if cursor < len(result.original_text):
            segments.append((result.original_text[cursor:], None))
        return segments

    def _get_entity_description(self, entity_type: str) -> str:
        entity = self.config.ARTIFACT_ENTITIES.get(entity_type)
        return entity.description if entity else entity_type

    def process_file_upload(self, file) -> Tuple[str, str]:
        """
        Читає завантажений файл і повертає текст для поля вводу.

        Returns:
            Tuple: (text, status_message)
        """
        if file is None:
            return "", ""

        try:
            read_result = FileHandler.read_file(file)
            text = sanitize_text(read_result.text)

            if len(text) > config.MAX_TEXT_LENGTH:
                text = text[:config.MAX_TEXT_LENGTH]
                status = (
                    f"⚠️ {read_result.filename}: текст обрізано до "
                    f"{config.MAX_TEXT_LENGTH} символів"
                )
            else:
                status = (
                    f"✅ {read_result.filename}: {len(text)} символів"
                    f" ({read_result.encoding or read_result.file_type})"
                )

            return text, status

        except Exception as e:
            logger.error(f"File upload failed: {e}", exc_info=True)
            return "", self._format_error(e)

    def export_report(
        self,
        result: Optional[AnalysisResult],
        format: str
    ) -> Tuple[Optional[str], str]:
        """
        Зберігає звіт у тимчасовий файл.

        Returns:
            Tuple: (шлях для gr.File або None, статус)
        """
        if result is None:
            return None, "⚠️ Спочатку виконайте аналіз"

        try:
            content = FileExporter.export_entities_report(result, format)
            path = os.path.join(
                tempfile.gettempdir(),
                generate_filename("artifacts_report", format)
            )
            with open(path, "wb") as f:
                f.write(content)

        except Exception as e:
            logger.error(f"Report export failed: {e}", exc_info=True)
            return None, self._format_error(e)

        logger.info(f"Report exported: {path}")
        return path, f"✅ {os.path.basename(path)}"

    # ============ ПЕРЕВІРКА ПАТЕРНУ ============

    def test_pattern(self, pattern_name: str, text: str) -> str:
        """Показує всі збіги одного патерну (для налагодження граматики)."""
        try:
            matches = list(self.recognizer.scan(pattern_name, text or ""))
        except Exception as e:
            logger.error(f"Pattern test failed: {e}", exc_info=True)
            return self._format_error(e)

        if not matches:
            return f"{pattern_name}: збігів немає"

        lines = [f"{pattern_name}: {len(matches)} збіг(ів)"]
        for m in matches:
            suffix = f" via {m.alternative}" if m.alternative else ""
            lines.append(f"  [{m.start}:{m.end}] {m.text!r}{suffix}")
        return "\n".join(lines)

    # ============ НАЛАШТУВАННЯ ============

    def update_settings(self, selected: List[str]) -> str:
        """Зберігає вибрані типи та синхронізує їх з глобальним конфігом."""
        self.enabled_entities = set(selected)

        for entity_type in self.config.ARTIFACT_ENTITIES:
            self.config.update_entity_state(
                entity_type,
                entity_type in self.enabled_entities
            )

        logger.info(f"Settings updated: {len(self.enabled_entities)} artifact types")

        return (
            f"✅ Збережено. Типів артефактів для пошуку: {len(self.enabled_entities)}"
        )

    # ============ UI CONSTRUCTION ============

    def build_interface(self) -> gr.Blocks:
        with gr.Blocks(title="Розпізнавач артефактів", theme=gr.themes.Soft()) as interface:

            gr.Markdown(
                """
                # 🛰️ Розпізнавач мережевих та файлових артефактів

                IP та MAC адреси, доменні імена, email, телефони, UNIX/Windows шляхи.
                """
            )

            analysis_result_state = gr.State(value=None)

            with gr.Tab("🔍 Аналіз тексту"):
                with gr.Row():
                    file_input = gr.File(
                        label="Файл (TXT, LOG, CONF, DOCX)",
                        file_types=sorted(FileHandler.SUPPORTED_EXTENSIONS)
                    )
                    file_status = gr.Textbox(label="Статус файлу", interactive=False)

                analyze_btn = gr.Button("🔍 Знайти артефакти", variant="primary")

                with gr.Row(equal_height=True):
                    with gr.Column(scale=1):
                        input_text = gr.Textbox(
                            label="Текст",
                            lines=12,
                            placeholder="Jan 12 10:01 sshd: accepted key for bob from 10.1.1.1 ..."
                        )
                    with gr.Column(scale=1):
                        anonymized_output = gr.Textbox(
                            label="Замаскований текст", lines=12, interactive=False
                        )

                highlighted_output = gr.HighlightedText(label="Знайдені артефакти")
                entities_output = gr.Textbox(label="Звіт", lines=10, interactive=False)

                with gr.Row():
                    report_format = gr.Radio(
                        choices=[ExportFormat.JSON, ExportFormat.CSV, ExportFormat.TXT],
                        value=ExportFormat.JSON,
                        label="Формат звіту"
                    )
                    export_btn = gr.Button("💾 Експортувати звіт")
                    report_file = gr.File(label="Звіт", interactive=False)
                export_status = gr.Textbox(label="Статус експорту", interactive=False)

                file_input.change(
                    fn=self.process_file_upload,
                    inputs=[file_input],
                    outputs=[input_text, file_status]
                )
                analyze_btn.click(
                    fn=self.analyze_text,
                    inputs=[input_text],
                    outputs=[
                        entities_output,
                        anonymized_output,
                        highlighted_output,
                        analysis_result_state
                    ]
                )
                export_btn.click(
                    fn=self.export_report,
                    inputs=[analysis_result_state, report_format],
                    outputs=[report_file, export_status]
                )

            with gr.Tab("🧪 Перевірка патерну"):
                pattern_choice = gr.Dropdown(
                    choices=list(PATTERN_ORDER), value="IP", label="Патерн"
                )
                pattern_text = gr.Textbox(label="Текст", lines=4)
                pattern_btn = gr.Button("Перевірити")
                pattern_output = gr.Textbox(label="Збіги", lines=8, interactive=False)

                pattern_btn.click(
                    fn=self.test_pattern,
                    inputs=[pattern_choice, pattern_text],
                    outputs=[pattern_output]
                )

            with gr.Tab("⚙️ Налаштування"):
                entity_checks = gr.CheckboxGroup(
                    choices=list(self.config.ARTIFACT_ENTITIES.keys()),
                    value=sorted(self.enabled_entities),
                    label="Типи артефактів"
                )
                save_settings_btn = gr.Button("💾 Зберегти налаштування")
                settings_status = gr.Textbox(label="Статус", interactive=False)

                save_settings_btn.click(
                    fn=self.update_settings,
                    inputs=[entity_checks],
                    outputs=[settings_status]
                )

        return interface

    def launch(self, **kwargs) -> None:
        """Будує Blocks і запускає сервер; kwargs передаються в Blocks.launch()."""
        options = dict(DEFAULT_LAUNCH_OPTIONS, **kwargs)
        host = options["server_name"]
        options["server_port"] = self._resolve_server_port(host, options.get("server_port"))

        logger.info(f"Launching Gradio on {host}:{options['server_port'] or 'auto'}")
        self.build_interface().launch(**options)

    def _resolve_server_port(self, host: str, requested_port: Optional[int]) -> Optional[int]:
        """
        Перший вільний порт серед: GRADIO_SERVER_PORT, requested_port, 7860-7869.

        None означає, що порт вибере сам Gradio.
        """
        preferred: List[int] = []

        env_value = os.getenv("GRADIO_SERVER_PORT")
        if env_value:
            if env_value.isdigit():
                preferred.append(int(env_value))
            else:
                logger.warning(f"Ignoring non-numeric GRADIO_SERVER_PORT={env_value!r}")

        if requested_port is not None:
            preferred.append(int(requested_port))

        for port in dict.fromkeys(preferred + list(PORT_FALLBACK_RANGE)):
            if not self._is_port_available(host, port):
                continue
            if requested_port is not None and port != requested_port:
                logger.warning(f"Port {requested_port} is taken, using {port}")
            return port

        logger.warning("No free port found, Gradio will pick one")
        return None

    @staticmethod
    def _is_port_available(host: str, port: int) -> bool:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host or "127.0.0.1", port))
            return True
        except OSError:
            return False
        finally:
            sock.close()


def create_interface() -> GradioInterface:
    return GradioInterface()
