from pathlib import Path
import streamlit as st

from metwatch.logs import log
from metwatch.ui.tokens import css_vars


def apply_styles(theme: str = "dark"):
    css_path = Path(__file__).resolve().parent / "styles.css"
    try:
        css = css_path.read_text(encoding="utf-8")
    except OSError as exc:
        log(f"styles: {exc}")
        return
    st.markdown(f"<style>{css_vars(theme)}\n{css}</style>", unsafe_allow_html=True)
