import streamlit as st
from chartwise.api.schemas.export import ExportFormat
from chartwise.ui.api_client import get_client, APIError

st.title("Reports & Export")

client = get_client()

try:
    dataset = client.get_dataset()
except APIError as e:
    st.error(f"Failed to load dataset: {e.detail}")
    st.stop()

if dataset is None:
    st.warning("No dataset loaded. Go to 'Upload' first.")
    st.stop()

st.caption(f"{dataset.file_name}: {dataset.row_count} rows")

_LABELS = {
    ExportFormat.CSV: ("CSV", "Raw rows as comma-separated values"),
    ExportFormat.XLSX: ("Excel", "Spreadsheet-compatible rows"),
    ExportFormat.JSON: ("JSON", "Data, statistics, charts and AI analysis"),
    ExportFormat.PDF: ("PDF Report", "Summary, insights and charts"),
}

include_data = st.checkbox("Include data preview in PDF report", value=False)

for fmt, (label, description) in _LABELS.items():
    c1, c2 = st.columns([3, 1])
    c1.markdown(f"**{label}**  \n{description}")
    if c2.button(f"Prepare {label}", key=f"prep_{fmt.value}"):
        with st.spinner(f"Building {label}..."):
            try:
                st.session_state[f"export_{fmt.value}"] = client.export(fmt, include_data=include_data)
            except APIError as e:
                st.error(f"Export failed: {e.detail}")
    prepared = st.session_state.get(f"export_{fmt.value}")
    if prepared is not None:
        content, filename = prepared
        c2.download_button("Download", data=content, file_name=filename, key=f"dl_{fmt.value}")
