import streamlit as st
from chartwise.ui.api_client import get_client, APIError
from chartwise.ui.state import set_last_upload
from chartwise.ui.validation import validate_upload

st.title("Upload Data")

client = get_client()

# --- Uploader ---
uploaded = st.file_uploader("Upload a CSV file", type=["csv"])

if uploaded is not None and st.button("Load dataset", type="primary"):
    content = uploaded.getvalue()
    problems = validate_upload(uploaded.name, len(content))
    if problems:
        for msg in problems:
            st.error(msg)
    else:
        with st.spinner("Parsing..."):
            try:
                dataset = client.upload_dataset(uploaded.name, content, uploaded.type or "text/csv")
                set_last_upload(uploaded.name)
                st.success(f"Loaded {dataset.file_name}: {dataset.row_count} rows, {len(dataset.columns)} columns")
                for warning in dataset.warnings:
                    st.warning(warning)
            except APIError as e:
                st.error(f"Failed to load {uploaded.name}: {e.detail}")

st.divider()

# --- Current dataset ---
try:
    dataset = client.get_dataset()
except APIError as e:
    st.error(f"Failed to load dataset: {e.detail}")
    st.stop()

if dataset is None:
    st.info("No dataset loaded.")
    st.stop()

c1, c2 = st.columns([4, 1])
c1.subheader(dataset.file_name)
if c2.button("Clear data"):
    try:
        client.clear_dataset()
        st.rerun()
    except APIError as e:
        st.error(f"Failed to clear dataset: {e.detail}")

st.dataframe(
    [
        {
            "column": col.name,
            "type": col.type.value,
            "nulls": col.null_count,
            "unique": col.unique_count,
            "sample": ", ".join(str(v) for v in col.sample_values),
        }
        for col in dataset.columns
    ],
    use_container_width=True,
)

# --- Data preview ---
st.subheader("Data Preview")
c1, c2, c3, c4 = st.columns([3, 2, 1, 1])
search = c1.text_input("Search", placeholder="Filter rows...")
sort_by = c2.selectbox("Sort by", ["(none)"] + [c.name for c in dataset.columns])
direction = c3.selectbox("Order", ["asc", "desc"])
page_size = c4.selectbox("Rows", [10, 25, 50, 100])
page = st.number_input("Page", min_value=1, value=1, step=1)

try:
    rows = client.list_rows(
        search=search or None,
        sort_by=None if sort_by == "(none)" else sort_by,
        direction=direction,
        page=int(page),
        page_size=page_size,
    )
except APIError as e:
    st.error(f"Failed to load rows: {e.detail}")
    st.stop()

st.dataframe(rows.items, use_container_width=True)
st.caption(f"Page {rows.page} of {rows.total_pages} | {rows.total} matching rows")
