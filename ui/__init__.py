"""Gradio UI поверх core.analyzer."""
from ui.gradio_interface import GradioInterface, create_interface

__all__ = ["GradioInterface", "create_interface"]
