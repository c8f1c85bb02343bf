"""California ADU Permits Dashboard."""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from pipeline.aggregate import aggregate, headline_metrics
from pipeline.transform import load_records

st.set_page_config(
    page_title="California ADU Permits",
    page_icon="🏠",
    layout="wide",
)

COLORS = {
    "ADU": "#2563eb",
    "NON_ADU": "#10b981",
    "POTENTIAL_ADU_CONVERSION": "#f97316",
}
TYPE_LABELS = {
    "ADU": "ADU",
    "NON_ADU": "Non-ADU",
    "POTENTIAL_ADU_CONVERSION": "Potential ADU Conversion",
}


# ── Data ─────────────────────────────────────────────────────


@st.cache_data(ttl=3600)
def _load():
    return load_records()


result = _load()

if result.notice:
    st.warning(result.notice, icon="⚠️")


# ── Sidebar ──────────────────────────────────────────────────

st.sidebar.title("Filters")

all_years = sorted({r.year for r in result.records})
all_counties = sorted({r.county for r in result.records})

if all_years and min(all_years) < max(all_years):
    year_range = st.sidebar.slider(
        "Year Range",
        min_value=int(min(all_years)),
        max_value=int(max(all_years)),
        value=(int(min(all_years)), int(max(all_years))),
    )
else:
    year_range = (all_years[0], all_years[0]) if all_years else (0, 0)

selected_counties = st.sidebar.multiselect(
    "County",
    options=all_counties,
    default=None,
    placeholder="All counties",
)

with st.sidebar.expander("About the data"):
    st.markdown(f"""
Each record is one permit, classified as **ADU** (accessory dwelling unit),
**Non-ADU**, or **Potential ADU Conversion**.

County names are matched exactly as they appear in the source.

Source: **{result.source}** · {len(result.records):,} records ·
{result.rejected:,} rows quarantined (missing year, unknown classification,
or invalid value).
""")

records = [
    r
    for r in result.records
    if year_range[0] <= r.year <= year_range[1]
    and (not selected_counties or r.county in selected_counties)
]

bundle = aggregate(records)
metrics = headline_metrics(bundle)


# ── Title ────────────────────────────────────────────────────

st.title("California ADU Permits")
st.caption("Accessory dwelling unit permitting trends by year and county")

st.download_button(
    "Download aggregates (JSON)",
    data=bundle.model_dump_json(by_alias=True, indent=2),
    file_name="adu_permit_aggregates.json",
    mime="application/json",
)

c1, c2, c3 = st.columns(3)
c1.metric(
    "ADU Share of Permits (latest year)",
    f"{metrics.latest_adu_percentage}%",
    f"{metrics.adu_percentage_trend:+d} pts",
)
c2.metric(
    "Avg ADU Job Value (latest year)",
    f"${metrics.latest_avg_adu_value}K",
    f"{metrics.avg_adu_value_trend:+d}K",
)
c3.metric("Top County by ADUs", metrics.top_county)


def _frame(rows) -> pd.DataFrame:
    return pd.DataFrame([r.model_dump(by_alias=True) for r in rows])


# ── Tabs ─────────────────────────────────────────────────────

tab_overview, tab_trends, tab_geo, tab_value = st.tabs(
    ["Overview", "Trends", "Geographic", "Job Value"]
)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Tab 1: Overview
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

with tab_overview:
    col_left, col_right = st.columns(2)

    with col_left:
        st.subheader("ADU Percentage by Year")
        pct = _frame(bundle.adu_percentage_by_year)
        if not pct.empty:
            fig_pct = px.line(
                pct,
                x="year",
                y="aduPercentage",
                markers=True,
                labels={"year": "Year", "aduPercentage": "ADU %"},
                hover_data=["aduCount", "totalCount"],
            )
            fig_pct.update_traces(line_color=COLORS["ADU"])
            fig_pct.update_layout(height=350, xaxis_type="category")
            st.plotly_chart(fig_pct, use_container_width=True)

    with col_right:
        st.subheader("Permits by Type and Year")
        units = _frame(bundle.units_by_year)
        if not units.empty:
            fig_units = go.Figure()
            for key in ("POTENTIAL_ADU_CONVERSION", "NON_ADU", "ADU"):
                fig_units.add_trace(go.Scatter(
                    x=units["year"],
                    y=units[key],
                    mode="lines",
                    stackgroup="one",
                    name=TYPE_LABELS[key],
                    line=dict(color=COLORS[key]),
                ))
            fig_units.update_layout(
                height=350,
                yaxis_title="Permits",
                xaxis_type="category",
                legend=dict(orientation="h", y=-0.2),
            )
            st.plotly_chart(fig_units, use_container_width=True)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Tab 2: Trends
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

with tab_trends:
    st.subheader("ADU vs Total Permits")
    pct = _frame(bundle.adu_percentage_by_year)
    if not pct.empty:
        fig_cmp = go.Figure()
        fig_cmp.add_trace(go.Bar(x=pct["year"], y=pct["totalCount"], name="All permits", marker_color="#94a3b8"))
        fig_cmp.add_trace(go.Bar(x=pct["year"], y=pct["aduCount"], name="ADU", marker_color=COLORS["ADU"]))
        fig_cmp.update_layout(
            barmode="overlay",
            height=400,
            xaxis_type="category",
            legend=dict(orientation="h", y=-0.2),
        )
        st.plotly_chart(fig_cmp, use_container_width=True)

    st.subheader("ADU Share of Job Value")
    share = _frame(bundle.job_value_share_by_year)
    if not share.empty:
        fig_share = px.line(
            share,
            x="year",
            y="aduJobValuePercentage",
            markers=True,
            labels={"year": "Year", "aduJobValuePercentage": "ADU % of Job Value"},
            hover_data=["totalJobValue", "aduJobValue"],
        )
        fig_share.update_layout(height=350, xaxis_type="category")
        st.plotly_chart(fig_share, use_container_width=True)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Tab 3: Geographic
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

with tab_geo:
    col_left, col_right = st.columns(2)

    with col_left:
        st.subheader("Top Jurisdictions by ADU Count")
        juris = _frame(bundle.units_by_jurisdiction)
        if not juris.empty:
            fig_juris = px.bar(
                juris,
                x="ADU",
                y="county",
                orientation="h",
                hover_data=["total"],
                labels={"ADU": "ADU Permits", "county": "County"},
            )
            fig_juris.update_traces(marker_color=COLORS["ADU"])
            fig_juris.update_layout(height=350, yaxis=dict(autorange="reversed"))
            st.plotly_chart(fig_juris, use_container_width=True)

    with col_right:
        st.subheader("Avg ADU Job Value by County ($K)")
        by_county = _frame(bundle.job_value_by_county)
        if not by_county.empty:
            fig_county = px.bar(
                by_county,
                x="avgValue",
                y="county",
                orientation="h",
                hover_data=["count"],
                labels={"avgValue": "Avg Value ($K)", "county": "County"},
            )
            fig_county.update_traces(marker_color=COLORS["POTENTIAL_ADU_CONVERSION"])
            fig_county.update_layout(height=350, yaxis=dict(autorange="reversed"))
            st.plotly_chart(fig_county, use_container_width=True)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Tab 4: Job Value
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

with tab_value:
    st.subheader("Average ADU Job Value by Year ($K)")
    avg_year = _frame(bundle.average_adu_job_value_by_year)
    if not avg_year.empty:
        fig_avg = px.bar(
            avg_year,
            x="year",
            y="avgAduValue",
            hover_data=["count"],
            labels={"year": "Year", "avgAduValue": "Avg Value ($K)"},
        )
        fig_avg.update_traces(marker_color=COLORS["ADU"])
        fig_avg.update_layout(height=350, xaxis_type="category")
        st.plotly_chart(fig_avg, use_container_width=True)

    st.subheader("Average Job Value by Type ($)")
    by_type = _frame(bundle.average_job_value_by_type)
    if not by_type.empty:
        fig_type = go.Figure()
        for key in ("ADU", "NON_ADU", "POTENTIAL_ADU_CONVERSION"):
            fig_type.add_trace(go.Bar(
                x=by_type["year"],
                y=by_type[key],
                name=TYPE_LABELS[key],
                marker_color=COLORS[key],
            ))
        fig_type.update_layout(
            barmode="group",
            height=400,
            yaxis_title="Avg Job Value ($)",
            xaxis_type="category",
            legend=dict(orientation="h", y=-0.2),
        )
        st.plotly_chart(fig_type, use_container_width=True)
