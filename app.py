"""
Entry point: Gradio UI для розпізнавача артефактів.

Запуск:
    python app.py
    ARTIFACT_TLD_FILE=tlds-alpha-by-domain.txt python app.py
"""

import logging
import sys

from core.recognizer import get_recognizer
from ui.gradio_interface import create_interface


def setup_logging():
    """Logging configuration"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Suppress noisy libraries
    logging.getLogger("presidio-analyzer").setLevel(logging.WARNING)
    logging.getLogger("presidio-anonymizer").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def warmup_patterns():
    """
    Будує реєстр патернів до старту UI.

    Некоректна TLD таблиця (ARTIFACT_TLD_FILE) має зупинити запуск,
    а не проявитися при першому запиті.
    """
    logger = logging.getLogger(__name__)
    recognizer = get_recognizer()
    logger.info(
        f"✓ {len(recognizer.pattern_names())} patterns ready "
        f"({len(recognizer.tld_table)} TLDs)"
    )


def main():
    setup_logging()
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("Artifact recognizer UI - starting")
    logger.info("=" * 60)

    try:
        warmup_patterns()

        interface = create_interface()
        interface.launch()

    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
