import streamlit as st
from chartwise.ui.api_client import get_client, APIError
from chartwise.ui.state import get_dark_mode, set_dark_mode
from chartwise.ui.validation import run_all_checks

st.title("Settings")

client = get_client()

# --- Appearance ---
st.subheader("Appearance")
dark = st.toggle("Dark mode", value=get_dark_mode())
if dark != get_dark_mode():
    try:
        prefs = client.set_dark_mode(dark)
        set_dark_mode(prefs.dark_mode)
        st.rerun()
    except APIError as e:
        st.error(f"Failed to save preference: {e.detail}")

# --- AI ---
st.subheader("AI Configuration")
try:
    status = client.ai_status()
except APIError as e:
    st.error(f"Failed to load AI status: {e.detail}")
    st.stop()

if status.configured:
    st.success(status.message)
else:
    st.warning(status.message)

st.json({
    "enabled": status.enabled,
    "model": status.model,
    "auto_generate": status.auto_generate,
    "cache_enabled": status.cache_enabled,
    "min_call_interval_seconds": status.min_call_interval,
})

# --- Diagnostics ---
st.subheader("Diagnostics")
if st.button("Run checks"):
    errors = run_all_checks()
    if errors:
        for err in errors:
            st.error(err)
    else:
        st.success("All checks passed")
