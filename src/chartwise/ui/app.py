"""Streamlit entry point: ``streamlit run src/chartwise/ui/app.py``."""
import streamlit as st
from chartwise.ui.api_client import get_client, APIError
from chartwise.ui.state import init_session, set_dark_mode
from chartwise.ui.validation import run_all_checks

st.set_page_config(page_title="Chartwise", page_icon="\U0001f4ca", layout="wide")
init_session()

st.title("Chartwise")
st.caption("Upload a CSV, build charts, and ask AI for insights.")

errors = run_all_checks()
if errors:
    for err in errors:
        st.error(err)
    st.info("Start the API with `chartwise serve` and reload this page.")
    st.stop()

client = get_client()

try:
    prefs = client.get_preferences()
    set_dark_mode(prefs.dark_mode)
    dataset = client.get_dataset()
except APIError as e:
    st.error(f"Failed to load state: {e.detail}")
    st.stop()

if dataset is None:
    st.info("No dataset loaded yet. Go to 'Upload' to get started.")
else:
    c1, c2, c3 = st.columns(3)
    c1.metric("Dataset", dataset.file_name)
    c2.metric("Rows", dataset.row_count)
    c3.metric("Columns", len(dataset.columns))
    st.success("Dataset ready. Open 'Dashboard' to build charts.")
