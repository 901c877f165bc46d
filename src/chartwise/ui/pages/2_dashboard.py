import streamlit as st
from chartwise.api.schemas.charts import ChartCreate
from chartwise.models.chart import Aggregation, ChartType
from chartwise.models.dataset import ColumnType
from chartwise.ui.api_client import get_client, APIError
from chartwise.ui.charts import build_figure
from chartwise.ui.state import get_dark_mode, get_editing_chart_id, set_editing_chart_id

st.title("Dashboard")

client = get_client()

try:
    dataset = client.get_dataset()
except APIError as e:
    st.error(f"Failed to load dataset: {e.detail}")
    st.stop()

if dataset is None:
    st.warning("No dataset loaded. Go to 'Upload' first.")
    st.stop()

# --- Summary cards ---
summary = dataset.summary
c1, c2, c3, c4, c5 = st.columns(5)
c1.metric("Rows", summary.total_rows)
c2.metric("Columns", summary.total_columns)
c3.metric("Completeness", f"{summary.completeness}%")
c4.metric("Quality Score", summary.quality_score)
c5.metric("Size", summary.memory_size)

st.divider()

# --- Chart configurator ---
st.subheader("Add Chart")

names = [c.name for c in dataset.columns]
numeric = [c.name for c in dataset.columns if c.type is ColumnType.NUMBER]

if st.button("Suggest a chart"):
    try:
        suggestion = client.suggest_chart()
        if suggestion.chart_type is None:
            st.info(suggestion.reason)
        else:
            st.session_state["chart_type"] = suggestion.chart_type.value
            st.session_state["x_column"] = suggestion.x_column or suggestion.category_column
            st.session_state["y_column"] = suggestion.y_column
            st.success(f"{suggestion.chart_type.value.title()}: {suggestion.reason}")
    except APIError as e:
        st.error(f"Suggestion failed: {e.detail}")

types = [t.value for t in ChartType]
chart_type = ChartType(st.selectbox(
    "Chart type", types, index=types.index(st.session_state.get("chart_type", "bar")),
))
title = st.text_input("Title")

payload: ChartCreate
if chart_type is ChartType.PIE:
    c1, c2, c3 = st.columns(3)
    category = c1.selectbox("Category column", names)
    value = c2.selectbox("Value column (optional)", ["(count)"] + numeric)
    top_n = c3.number_input("Top N", min_value=1, value=10)
    payload = ChartCreate(
        chart_type=chart_type,
        title=title,
        category_column=category,
        value_column=None if value == "(count)" else value,
        top_n=int(top_n),
    )
else:
    c1, c2, c3 = st.columns(3)
    x_default = st.session_state.get("x_column")
    y_default = st.session_state.get("y_column")
    x_column = c1.selectbox("X axis", names, index=names.index(x_default) if x_default in names else 0)
    y_options = numeric or names
    y_column = c2.selectbox(
        "Y axis", y_options, index=y_options.index(y_default) if y_default in y_options else 0,
    )
    name_column = None
    aggregation = None
    if chart_type is ChartType.SCATTER:
        label = c3.selectbox("Label column (optional)", ["(none)"] + names)
        name_column = None if label == "(none)" else label
    else:
        default_agg = "avg" if chart_type is ChartType.LINE else "sum"
        aggs = [a.value for a in Aggregation]
        aggregation = Aggregation(c3.selectbox("Aggregation", aggs, index=aggs.index(default_agg)))
    payload = ChartCreate(
        chart_type=chart_type,
        title=title,
        x_column=x_column,
        y_column=y_column,
        name_column=name_column,
        aggregation=aggregation,
    )

c1, c2 = st.columns(2)
if c1.button("Preview"):
    try:
        data = client.preview_chart(payload)
        fig = build_figure(payload.to_config(), data, get_dark_mode())
        if fig is None:
            st.warning(data.error or "No data to display.")
        else:
            st.plotly_chart(fig, use_container_width=True)
    except APIError as e:
        st.error(f"Preview failed: {e.detail}")

if c2.button("Add to dashboard", type="primary"):
    try:
        chart = client.create_chart(payload)
        st.toast(f"Added {chart.chart_type.value} chart", icon="✅")
    except APIError as e:
        st.error(f"Failed to add chart: {e.detail}")

st.divider()

# --- Chart grid ---
try:
    charts = client.list_charts()
except APIError as e:
    st.error(f"Failed to load charts: {e.detail}")
    st.stop()

if not charts.items:
    st.info("No charts yet. Configure one above.")
    st.stop()

cols = st.columns(2)
for i, chart in enumerate(charts.items):
    with cols[i % 2]:
        with st.container(border=True):
            st.markdown(f"**{chart.title or chart.chart_type.value.title() + ' chart'}**")
            try:
                data = client.chart_data(chart.id)
            except APIError as e:
                st.error(f"Failed to load chart data: {e.detail}")
                continue
            fig = build_figure(chart, data, get_dark_mode())
            if fig is None:
                st.warning(data.error or "No data to display for this chart.")
            else:
                st.plotly_chart(fig, use_container_width=True, key=f"fig_{chart.id}")
                if data.stats:
                    st.caption(", ".join(f"{k}: {v}" for k, v in data.stats.items()))
            b1, b2 = st.columns(2)
            if b1.button("Edit", key=f"edit_{chart.id}"):
                set_editing_chart_id(chart.id)
            if b2.button("Remove", key=f"rm_{chart.id}"):
                try:
                    client.delete_chart(chart.id)
                    st.rerun()
                except APIError as e:
                    st.error(f"Failed to remove chart: {e.detail}")

            if get_editing_chart_id() == chart.id:
                with st.form(f"form_{chart.id}"):
                    new_title = st.text_input("Title", value=chart.title)
                    if chart.chart_type is ChartType.PIE:
                        cat = st.selectbox(
                            "Category column", names,
                            index=names.index(chart.category_column) if chart.category_column in names else 0,
                        )
                        update = ChartCreate(
                            chart_type=chart.chart_type, title=new_title, category_column=cat,
                            value_column=chart.value_column, top_n=chart.top_n,
                        )
                    else:
                        x_new = st.selectbox(
                            "X axis", names, index=names.index(chart.x_column) if chart.x_column in names else 0,
                        )
                        y_new = st.selectbox(
                            "Y axis", names, index=names.index(chart.y_column) if chart.y_column in names else 0,
                        )
                        update = ChartCreate(
                            chart_type=chart.chart_type, title=new_title, x_column=x_new, y_column=y_new,
                            name_column=chart.name_column, aggregation=chart.aggregation,
                        )
                    if st.form_submit_button("Save"):
                        try:
                            client.update_chart(chart.id, update)
                            set_editing_chart_id(None)
                            st.rerun()
                        except APIError as e:
                            st.error(f"Failed to update chart: {e.detail}")
