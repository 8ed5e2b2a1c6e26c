from datetime import timedelta

import streamlit as st
import plotly.graph_objects as go

from covid_dashboard import NOT_READY, SnapshotBuilder, SnapshotScheduler, load_config
from covid_dashboard.views import (
    FORECAST_OUTLOOK,
    MODEL_ACCURACY,
    Tab,
    change_direction,
    countries_frame,
    country_names,
    filter_countries,
    forecast_frame,
    format_change,
    format_count,
    series_frame,
    tab_series,
)

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="COVID-19 Analytics Platform",
    page_icon="🦠",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# ============================================================================
# CUSTOM CSS
# ============================================================================
st.markdown("""
    <style>
    .stat-card {
        background-color: #FFFFFF;
        padding: 20px;
        border-radius: 10px;
        border: 1px solid #f3f4f6;
        box-shadow: 0 4px 6px rgba(0, 0, 0, 0.08);
    }
    .stat-title { color: #4b5563; font-size: 14px; font-weight: 500; }
    .stat-value { font-size: 26px; font-weight: bold; margin-top: 4px; }
    .increase { color: #ef4444; font-size: 14px; }
    .decrease { color: #22c55e; font-size: 14px; }
    </style>
""", unsafe_allow_html=True)

CARD_COLORS = {"blue": "#2563eb", "red": "#dc2626", "green": "#16a34a", "orange": "#ea580c"}

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

@st.cache_resource
def get_scheduler():
    """One scheduler per server process, shared by every session."""
    config = load_config()
    scheduler = SnapshotScheduler(SnapshotBuilder(config))
    scheduler.start()
    return scheduler


def stat_card(title, value, color="blue", change=None):
    change_html = ""
    if change is not None:
        change_html = (
            f"<div class='{change_direction(change)}'>"
            f"📈 {format_change(change)} today</div>"
        )
    st.markdown(f"""
    <div class='stat-card'>
        <div class='stat-title'>{title}</div>
        <div class='stat-value' style='color: {CARD_COLORS[color]};'>{format_count(value)}</div>
        {change_html}
    </div>
    """, unsafe_allow_html=True)


def line_chart(frame, columns, height=300, dashed=False):
    colors = {"cases": "#3B82F6", "deaths": "#EF4444", "recovered": "#10B981", "predicted": "#8B5CF6"}
    fig = go.Figure()
    for column in columns:
        fig.add_trace(go.Scatter(
            x=frame["date"],
            y=frame[column],
            mode='lines',
            name=column.capitalize(),
            line=dict(color=colors[column], width=2, dash='dash' if dashed else None)
        ))
    fig.update_layout(
        height=height,
        plot_bgcolor='white',
        paper_bgcolor='white',
        hovermode='x unified',
        margin=dict(t=20, b=40, l=50, r=20),
        xaxis=dict(showline=True, linewidth=1, linecolor='#dee2e6', gridcolor='#f1f5f9'),
        yaxis=dict(showline=True, linewidth=1, linecolor='#dee2e6', gridcolor='#f1f5f9')
    )
    st.plotly_chart(fig, use_container_width=True)


# ============================================================================
# LIVE DASHBOARD
# ============================================================================
scheduler = get_scheduler()
config = scheduler.builder.config


@st.fragment(run_every=timedelta(seconds=scheduler.interval))
def render_dashboard():
    """Re-reads the published snapshot every refresh interval, without a page reload."""
    snapshot = scheduler.current_snapshot()

    if snapshot is NOT_READY:
        with st.spinner("Loading COVID-19 data..."):
            st.info("Waiting for the first data snapshot.")
        return

    # ============================================================================
    # HEADER
    # ============================================================================
    head_col, updated_col = st.columns([4, 1])
    with head_col:
        st.markdown("# 🌐 COVID-19 Analytics Platform")
        st.caption("Real-time data analysis and predictions")
    with updated_col:
        st.caption("Last Updated")
        st.write(snapshot.generated_at.strftime("%Y-%m-%d %H:%M:%S UTC"))

    st.write("")

    # ============================================================================
    # GLOBAL STATISTICS
    # ============================================================================
    totals = snapshot.global_stats
    card_cols = st.columns(4)
    with card_cols[0]:
        stat_card("Total Cases", totals.total_cases, "blue", change=totals.today_cases)
    with card_cols[1]:
        stat_card("Total Deaths", totals.total_deaths, "red", change=totals.today_deaths)
    with card_cols[2]:
        stat_card("Recovered", totals.total_recovered, "green")
    with card_cols[3]:
        stat_card("Active Cases", totals.active_cases, "orange")

    st.write("")

    # ============================================================================
    # TABS
    # ============================================================================
    tab_overview, tab_trends, tab_countries, tab_predictions = st.tabs([
        "📊 Overview",
        "📈 Trends",
        "📍 Countries",
        "🎯 Predictions"
    ])

    # -------------------------
    # TAB 1: OVERVIEW
    # -------------------------
    with tab_overview:
        recent = series_frame(tab_series(snapshot, Tab.OVERVIEW, config.overview_window))
        left_col, right_col = st.columns(2)

        with left_col:
            st.subheader("Daily Cases Trend")
            line_chart(recent, ["cases"])

        with right_col:
            st.subheader("Recovery vs Deaths")
            line_chart(recent, ["recovered", "deaths"])

    # -------------------------
    # TAB 2: TRENDS
    # -------------------------
    with tab_trends:
        st.subheader("Historical Trends (Weekly Data)")
        history = series_frame(tab_series(snapshot, Tab.TRENDS))
        line_chart(history, ["cases", "deaths", "recovered"], height=400)

    # -------------------------
    # TAB 3: COUNTRIES
    # -------------------------
    with tab_countries:
        title_col, select_col = st.columns([3, 1])
        with title_col:
            st.subheader("Country Statistics")
        with select_col:
            selected = st.selectbox(
                "Country",
                options=[""] + country_names(snapshot),
                format_func=lambda name: name or "All Countries",
                label_visibility="collapsed",
                key="country_filter"
            )

        table = countries_frame(filter_countries(snapshot, selected, limit=config.table_limit))
        for column in ("cases", "deaths", "recovered"):
            table[column] = table[column].map(format_count)

        st.dataframe(
            table,
            use_container_width=True,
            hide_index=True,
            column_config={
                "country": "Country",
                "cases": "Total Cases",
                "deaths": "Deaths",
                "recovered": "Recovered",
                "vaccination_rate": st.column_config.ProgressColumn(
                    "Vaccination %", min_value=0, max_value=100, format="%d%%"
                ),
            }
        )

    # -------------------------
    # TAB 4: PREDICTIONS
    # -------------------------
    with tab_predictions:
        chart_col, model_col = st.columns(2)

        with chart_col:
            st.subheader("30-Day Prediction")
            line_chart(forecast_frame(snapshot.forecast), ["predicted"], dashed=True)

        with model_col:
            st.subheader("Model Performance")
            for model_name, accuracy in MODEL_ACCURACY.items():
                name_col, score_col = st.columns([3, 1])
                name_col.write(f"**{model_name}**")
                score_col.markdown(f"<span style='color: green;'>{accuracy}% Accuracy</span>", unsafe_allow_html=True)

            st.info(f"""
            **Next 7 Days Forecast**

            Expected average daily cases: **{format_count(FORECAST_OUTLOOK['expected_daily_cases'])}**

            Confidence interval: ±{format_count(FORECAST_OUTLOOK['confidence_interval'])} cases
            """)


render_dashboard()

# ============================================================================
# FOOTER
# ============================================================================
st.markdown("---")

st.caption("COVID-19 Analytics Platform - Built for Portfolio Demonstration")
st.caption("Data sources: WHO, Johns Hopkins CSSE, Our World in Data. All figures shown are simulated.")
