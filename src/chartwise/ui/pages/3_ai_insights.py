import streamlit as st
from chartwise.ai.helpers import describe_ai_error
from chartwise.api.schemas.charts import ChartCreate
from chartwise.models.chart import Aggregation, ChartType
from chartwise.ui.api_client import get_client, APIError
from chartwise.ui.state import add_chat_turn, clear_chat_history, get_chat_history

st.title("AI Insights")

client = get_client()

_TYPE_ICONS = {"positive": "✅", "warning": "⚠️", "negative": "❌", "neutral": "ℹ️"}
_TREND_ICONS = {"up": "📈", "down": "📉", "stable": "➡️"}

try:
    dataset = client.get_dataset()
    insights = client.get_insights()
except APIError as e:
    st.error(f"Failed to load insights: {e.detail}")
    st.stop()

if not insights.status.configured:
    st.warning(insights.status.message)
    st.caption("Set AI_ENABLED=true and OPENAI_API_KEY in your environment, then restart the API.")
    st.stop()

if dataset is None:
    st.info("Upload a dataset to generate insights.")
    st.stop()

# --- Analysis ---
if st.button("Analyze dataset", type="primary", disabled=insights.loading):
    with st.spinner("Asking the model..."):
        try:
            client.analyze()
            insights = client.get_insights()
        except APIError as e:
            if e.kind == "local_rate_limit":
                st.warning(describe_ai_error(e))
            else:
                st.error(f"Analysis failed: {describe_ai_error(e)}")

analysis = insights.analysis
if analysis is None:
    st.info("No analysis yet. Click 'Analyze dataset'.")
else:
    if analysis.cached:
        st.caption("Showing a cached result for this dataset.")

    if analysis.data_quality is not None:
        dq = analysis.data_quality
        c1, c2, c3 = st.columns(3)
        c1.metric("Data Quality", f"{dq.score:.0f}/100")
        c2.metric("Completeness", f"{dq.completeness:.0f}%")
        c3.metric("Rating", dq.rating or "-")
        for issue in dq.issues:
            st.markdown(f"- {issue}")

    st.subheader("Key Insights")
    for insight in analysis.insights:
        with st.expander(f"{_TYPE_ICONS.get(insight.type, '')} {insight.title}"):
            st.write(insight.description)
            st.caption(f"{insight.category} | confidence {insight.confidence:.0f}%")
            for point in insight.data_points:
                st.markdown(f"- {point}")

    if analysis.recommendations:
        st.subheader("Recommendations")
        for rec in analysis.recommendations:
            st.markdown(f"**[{rec.priority.upper()}] {rec.action}**")
            st.caption(f"{rec.reason} Impact: {rec.impact}")

    if analysis.predictions is not None:
        st.subheader("Predictions")
        p = analysis.predictions
        st.write(f"{_TREND_ICONS.get(p.trend, '')} {p.forecast}")
        st.caption(f"Confidence {p.confidence:.0f}%")

    if analysis.anomalies:
        st.subheader("Anomalies")
        for anomaly in analysis.anomalies:
            st.markdown(f"- **{anomaly.column}** ({anomaly.severity}): {anomaly.description}")

    if analysis.usage is not None:
        st.caption(f"Tokens used: {analysis.usage.total_tokens}")

st.divider()

# --- AI chart suggestions ---
st.subheader("Suggested Charts")
if st.button("Get chart suggestions"):
    with st.spinner("Asking the model..."):
        try:
            st.session_state["ai_chart_suggestions"] = client.ai_chart_suggestions().items
        except APIError as e:
            st.error(f"Suggestion failed: {describe_ai_error(e)}")

for i, suggestion in enumerate(st.session_state.get("ai_chart_suggestions", [])):
    with st.container(border=True):
        st.markdown(f"**{suggestion.title or suggestion.chart_type.title()}** ({suggestion.chart_type})")
        st.caption(suggestion.reasoning)
        if st.button("Add to dashboard", key=f"add_ai_{i}"):
            try:
                agg = suggestion.aggregation
                client.create_chart(ChartCreate(
                    chart_type=ChartType(suggestion.chart_type),
                    title=suggestion.title,
                    x_column=suggestion.x_column,
                    y_column=suggestion.y_column,
                    category_column=suggestion.category_column,
                    value_column=suggestion.value_column,
                    aggregation=Aggregation.parse(agg, Aggregation.SUM) if agg else None,
                ))
                st.toast("Chart added", icon="✅")
            except (APIError, ValueError) as e:
                st.error(f"Could not add chart: {getattr(e, 'detail', e)}")

st.divider()

# --- Q&A ---
st.subheader("Ask about your data")

for question, answer in get_chat_history():
    with st.chat_message("user"):
        st.write(question)
    with st.chat_message("assistant"):
        st.write(answer)

question = st.chat_input("Ask a question about the dataset")
if question:
    try:
        reply = client.ask(question)
        add_chat_turn(reply.question, reply.answer)
        st.rerun()
    except APIError as e:
        st.error(f"Question failed: {describe_ai_error(e)}")

if get_chat_history() and st.button("Clear conversation"):
    clear_chat_history()
    st.rerun()
