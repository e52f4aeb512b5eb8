"""
Rankings Page - Region rankings by composite score or raw indicator.
"""

import streamlit as st

st.set_page_config(
    page_title="Rankings - Mexico Development",
    page_icon="🏆",
    layout="wide",
)

from dashboard.data.queries import get_rankings, get_settings, load_analysis
from mxdev.analysis.ranking import RANKING_METRICS
from mxdev.exceptions import AnalysisError
from mxdev.reporting.charts import ranking_bar_chart


def main() -> None:
    """Main page content."""
    st.title("🏆 Region Rankings")

    data_path, seed, n_clusters = get_settings()
    try:
        result = load_analysis(data_path, seed, n_clusters)
    except (AnalysisError, FileNotFoundError) as e:
        st.error(f"Data not available: {e}")
        return

    st.sidebar.header("⚙️ Settings")
    labels = {label: column for column, (label, _) in RANKING_METRICS.items()}
    selected_label = st.sidebar.selectbox("Metric", list(labels.keys()), index=0)
    key = labels[selected_label]
    lower_is_better = RANKING_METRICS[key][1]

    show_best = st.sidebar.radio("Show", ["🥇 Best", "📉 Worst"], index=0, horizontal=True)
    if show_best == "🥇 Best":
        ascending = lower_is_better
    else:
        ascending = not lower_is_better

    num_results = st.sidebar.slider(
        "Number of regions", min_value=1, max_value=len(result.regions), value=min(10, len(result.regions))
    )

    ranking = get_rankings(result, key, limit=num_results, ascending=ascending)

    title_suffix = "Best" if show_best == "🥇 Best" else "Worst"
    st.subheader(f"📋 {title_suffix} Regions by {selected_label}")

    col_table, col_chart = st.columns([1.2, 1])

    with col_table:
        st.dataframe(
            ranking.to_pandas(),
            use_container_width=True,
            hide_index=True,
            column_config={
                "position": st.column_config.NumberColumn("Pos.", width="small"),
                "region": "Region",
                key: st.column_config.NumberColumn(selected_label, format="%.3f"),
                "cluster": st.column_config.NumberColumn("Cluster", format="%d"),
                "tier_label": "Tier",
            },
        )

    with col_chart:
        fig = ranking_bar_chart(ranking, key)
        st.plotly_chart(fig, use_container_width=True)


if __name__ == "__main__":
    main()
