"""Session-state helpers for the Streamlit UI.

No services or store; only reads/writes ``st.session_state``.
"""
import streamlit as st
from typing import Optional


def init_session() -> None:
    """Initialize session state variables."""
    st.session_state.setdefault("dark_mode", False)
    st.session_state.setdefault("last_upload", None)
    st.session_state.setdefault("chat_history", [])
    st.session_state.setdefault("editing_chart_id", None)


def get_dark_mode() -> bool:
    return bool(st.session_state.get("dark_mode", False))


def set_dark_mode(enabled: bool) -> None:
    st.session_state["dark_mode"] = enabled


def get_last_upload() -> Optional[str]:
    """Name of the file most recently uploaded in this session."""
    return st.session_state.get("last_upload")


def set_last_upload(file_name: str) -> None:
    st.session_state["last_upload"] = file_name


def get_chat_history() -> list[tuple[str, str]]:
    return st.session_state.setdefault("chat_history", [])


def add_chat_turn(question: str, answer: str) -> None:
    get_chat_history().append((question, answer))


def clear_chat_history() -> None:
    st.session_state["chat_history"] = []


def get_editing_chart_id() -> Optional[str]:
    return st.session_state.get("editing_chart_id")


def set_editing_chart_id(chart_id: Optional[str]) -> None:
    st.session_state["editing_chart_id"] = chart_id
