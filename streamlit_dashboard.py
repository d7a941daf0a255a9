import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from collect import CodeforcesClient
from compare import ComparisonError, compare_handles, format_value
from process import heatmap_weeks, intensity_level, pick_problem_by_rating, pick_random_problem, visible_sections
from recommend import ALL_TAGS, ProblemCatalog, problem_url, recommend
from session import SnapshotStore, cached_sample, run_lookup
from utils import setup_logging

# Set page config
st.set_page_config(
    page_title="Codeforces Analyzer",
    page_icon="⚡",
    layout="wide"
)

# Custom CSS to increase heading font sizes
st.markdown("""
<style>
h1 {
    font-size: 2.8rem !important;
    font-weight: 600 !important;
    margin-bottom: 1rem !important;
}
h3 {
    font-size: 1.8rem !important;
    font-weight: 500 !important;
    margin-bottom: 0.6rem !important;
}
.winner {
    color: #1f77b4;
    font-weight: 700;
}
</style>
""", unsafe_allow_html=True)

# Heatmap colours by intensity level
HEATMAP_COLORS = ["#ebedf0", "#c6e48b", "#7bc96f", "#239a3b", "#196127"]

RATING_WINDOW_LABELS = {
    "easier": "Easier",
    "nearby": "Your Level",
    "harder": "Challenging",
}

DSA_RESOURCES = [
    ("Basics of Programming", "https://www.youtube.com/playlist?list=PLfqMhTWNBTe0b2nM6JHVCnAkhQRGiZMSJ"),
    ("Arrays", "https://youtube.com/playlist?list=PLgUwDviBIf0rENwdL0nEH0uGom9no0nyB"),
    ("Strings", "https://youtube.com/playlist?list=PLPyD8bF-abzsMF6e44aiWzlTT2VrZwjLu"),
    ("Recursion & Backtracking", "https://youtube.com/playlist?list=PLgUwDviBIf0rGlzIn_7rsaR2FQ5e6ZOL9"),
    ("Linked List", "https://youtube.com/playlist?list=PLgUwDviBIf0rAuz8tVcM0AymmhTRsfaLU"),
    ("Stacks & Queues", "https://youtube.com/playlist?list=PLzjZaW71kMwRTtDWYVPvkJypUpKWbuT7_"),
    ("Binary Trees", "https://youtube.com/playlist?list=PLzjZaW71kMwQ-JABTOTypnpRk1BnD2Nx4"),
    ("Binary Search Trees", "https://youtube.com/playlist?list=PLzjZaW71kMwQ-JABTOTypnpRk1BnD2Nx4"),
    ("Heaps & Priority Queue", "https://youtube.com/playlist?list=PLzjZaW71kMwTF8ZcUwm9md_3MvtOfwGow"),
    ("Hashing & HashMaps", "https://youtube.com/playlist?list=PLzjZaW71kMwQ-D3oxCEDHAvYu8VC1XOsS"),
    ("Graphs (BFS, DFS, Shortest Path, MST)", "https://youtube.com/playlist?list=PLgUwDviBIf0oE3gA41TKO2H5bHpPd7fzn"),
    ("Dynamic Programming", "https://youtube.com/playlist?list=PLgUwDviBIf0qUlt5H_kiKYaNSqJ81PMMY"),
    ("Greedy Algorithms", "https://youtube.com/playlist?list=PLgUwDviBIf0rF1w2Koyh78zafB0cz7tea"),
    ("Segment Trees & Fenwick Trees", "https://youtube.com/playlist?list=PLEL7R4Pm6EmA1wAlmJs1LwPmSWmRnsA3H"),
    ("Advanced Graphs & Flows", "https://youtube.com/playlist?list=PLgUwDviBIf0oE3gA41TKO2H5bHpPd7fzn"),
    ("Number Theory", "https://youtube.com/playlist?list=PLauivoElc3giVROwL-6g9hO-LlSen_NaV"),
    ("Bit Manipulation", "https://youtube.com/playlist?list=PL-Jc9J83PIiFJRioti3ZV7QabwoJK6eKe"),
    ("Tries", "https://youtube.com/playlist?list=PLgUwDviBIf0pcIDCZnxhv0LkHf5KzG9zp"),
    ("Disjoint Set Union (DSU)", "https://youtu.be/zEAmQqOpfzM"),
]

@st.cache_resource
def get_client():
    setup_logging()
    return CodeforcesClient()

# One catalog per server process, fetched on first use
@st.cache_resource
def get_catalog():
    return ProblemCatalog(get_client())

def get_store() -> SnapshotStore:
    if "store" not in st.session_state:
        st.session_state.store = SnapshotStore()
    return st.session_state.store

def problem_link(problem) -> str:
    return f"[{problem.name}]({problem_url(problem)})"

def tag_pie(analysis):
    tag_df = pd.DataFrame([t.model_dump() for t in analysis.tag_stats])
    fig = px.pie(tag_df, values="accepted", names="name", title="Problem Tags Distribution")
    fig.update_traces(textinfo="label")
    fig.update_layout(title_font=dict(size=18), showlegend=False)
    return fig

def activity_heatmap(analysis):
    weeks = heatmap_weeks(analysis.activity)
    z = [[intensity_level(d.count) if d else None for d in week] for week in weeks]
    text = [[f"{d.day:%Y-%m-%d}: {d.count} submission{'s' if d.count != 1 else ''}" if d else "" for d in week]
            for week in weeks]
    # rows are weekdays, columns are weeks
    z = list(map(list, zip(*z)))
    text = list(map(list, zip(*text)))
    steps = len(HEATMAP_COLORS) - 1
    colorscale = [[i / steps, color] for i, color in enumerate(HEATMAP_COLORS)]
    fig = go.Figure(data=go.Heatmap(
        z=z,
        text=text,
        hoverinfo="text",
        y=["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"],
        zmin=0,
        zmax=steps,
        colorscale=colorscale,
        showscale=False,
        xgap=3,
        ygap=3,
    ))
    fig.update_layout(height=260, margin=dict(l=30, r=10, t=10, b=10), yaxis=dict(autorange="reversed"))
    fig.update_xaxes(showticklabels=False)
    return fig

def rating_bars(analysis):
    rating_df = pd.DataFrame([
        {
            "contest_id": r.contestId,
            "contest": r.contestName,
            "rating": r.newRating,
            "change": f"{r.delta:+d}",
        }
        for r in analysis.ratings
    ])
    fig = px.bar(
        rating_df,
        x=rating_df.index,
        y="rating",
        hover_data=["contest", "contest_id", "change"],
        title="Contest Rating Progress"
    )
    fig.update_layout(
        xaxis_title="Contest",
        yaxis_title="Rating",
        title_font=dict(size=18),
    )
    fig.update_xaxes(showticklabels=False)
    return fig

def render_user_card(user):
    st.markdown(f"<h3>{user.handle}</h3>", unsafe_allow_html=True)
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Current Rating", user.rating or "Unrated")
        if user.rank:
            st.caption(user.rank)
    with col2:
        st.metric("Max Rating", user.maxRating or "N/A")
        if user.maxRank:
            st.caption(user.maxRank)

def render_comparison():
    st.markdown("<h3>Compare Handles</h3>", unsafe_allow_html=True)
    col1, col2, col3 = st.columns([2, 1, 2])
    handle1 = col1.text_input("First handle", key="handle1")
    handle2 = col3.text_input("Second handle", key="handle2")
    if col2.button("Compare", use_container_width=True):
        try:
            with st.spinner("Comparing..."):
                st.session_state.comparison = compare_handles(handle1, handle2, get_client())
            st.session_state.comparison_error = None
        except ComparisonError as e:
            st.session_state.comparison = None
            st.session_state.comparison_error = str(e)

    if st.session_state.get("comparison_error"):
        st.error(st.session_state.comparison_error)
    comparison = st.session_state.get("comparison")
    if not comparison:
        return

    header = st.columns(3)
    header[0].markdown(f"**{comparison.first.user.handle}**  \n{comparison.first.user.rank or ''}")
    header[1].markdown("**VS**")
    header[2].markdown(f"**{comparison.second.user.handle}**  \n{comparison.second.user.rank or ''}")
    for m in comparison.metrics:
        row = st.columns(3)
        for side, column in ((1, row[0]), (2, row[2])):
            css = "winner" if m.winner == side else ""
            column.markdown(f"<span class='{css}'>{format_value(m, side)}</span>", unsafe_allow_html=True)
        row[1].markdown(m.label)

def render_pickers(analysis):
    col1, col2 = st.columns(2)
    has_submissions = bool(analysis.submissions)
    with col1:
        st.markdown("<h3>Random Problem Generator</h3>", unsafe_allow_html=True)
        if st.button("Pick Random Problem", disabled=not has_submissions, use_container_width=True):
            st.session_state.random_problem = pick_random_problem(analysis.submissions)
        problem = st.session_state.get("random_problem")
        if problem:
            st.markdown(problem_link(problem))
            if problem.rating:
                st.caption(f"Rating: {problem.rating}")
    with col2:
        st.markdown("<h3>Problem by Rating</h3>", unsafe_allow_html=True)
        rating = st.number_input("Enter Rating (e.g., 1200)", min_value=0, step=100, value=0)
        if st.button("Pick", disabled=not rating or not has_submissions):
            st.session_state.rating_problem = pick_problem_by_rating(analysis.submissions, int(rating))
            st.session_state.rating_picked = True
        problem = st.session_state.get("rating_problem")
        if problem:
            st.markdown(problem_link(problem))
        elif st.session_state.get("rating_picked"):
            st.warning("No solved problems found with this rating.")

def render_recommendations(analysis, token):
    st.markdown("<h3>Recommended Problems (Based on Weak Tags)</h3>", unsafe_allow_html=True)
    col1, col2, col3 = st.columns([2, 2, 1])
    tag = col1.selectbox(
        "Tag",
        [ALL_TAGS] + list(analysis.weak_tags),
        format_func=lambda t: "All Weak Tags" if t == ALL_TAGS else t,
    )
    window = col2.selectbox(
        "Difficulty",
        list(RATING_WINDOW_LABELS),
        index=1,
        format_func=RATING_WINDOW_LABELS.get,
    )
    refresh = col3.button("Refresh Recommendations")

    def sample():
        with st.spinner("Loading problems..."):
            problems = get_catalog().problems()
        user_rating = analysis.user.rating if analysis.user else None
        return recommend(problems, analysis.weak_tags, analysis.solved, user_rating, tag=tag, window=window)

    # reshuffled only for a new lookup, a filter change or a refresh click
    picks = cached_sample(st.session_state, "recommendations", (token, tag, window), refresh, sample)
    if not picks:
        st.info("No recommendations available. Try adjusting filters or solve more problems to identify weak areas.")
        return
    for problem in picks:
        tags = ", ".join(problem.tags[:3])
        st.markdown(f"{problem_link(problem)} `{problem.rating}`  \n{tags}")

def render_resources():
    st.markdown("<h3>Free DSA & CP Resources (Beginner → Advanced)</h3>", unsafe_allow_html=True)
    col1, col2 = st.columns(2)
    for i, (name, link) in enumerate(DSA_RESOURCES):
        (col1 if i % 2 == 0 else col2).markdown(f"[{name}]({link})")

def main():
    # Title
    st.title("Codeforces Analyzer")
    st.markdown("<p style='font-size: 1.4rem; margin-top: -0.8rem;'>Analyze your competitive programming journey with detailed insights</p>", unsafe_allow_html=True)

    store = get_store()
    with st.form("lookup"):
        handle = st.text_input("Enter Codeforces Handle (e.g., tourist, Benq)")
        if st.form_submit_button("Analyze"):
            with st.spinner("Loading..."):
                run_lookup(store, handle, get_client())
            for key in ("random_problem", "rating_problem", "rating_picked"):
                st.session_state.pop(key, None)

    token, analysis, error = store.current
    if error:
        st.error(error)

    render_comparison()

    if analysis is None:
        render_resources()
        return

    for warning in analysis.warnings:
        st.warning(warning)

    sections = visible_sections(analysis)
    render_user_card(analysis.user)

    if "tags" in sections:
        st.plotly_chart(tag_pie(analysis), use_container_width=True)
        if analysis.weak_tags:
            st.markdown("Weakest Topics: " + " ".join(f"`{t}`" for t in analysis.weak_tags))

    if "heatmap" in sections:
        st.markdown("<h3>Activity Heatmap (Last 6 Months)</h3>", unsafe_allow_html=True)
        col1, col2 = st.columns(2)
        col1.metric("Total", analysis.window_total)
        col2.metric("Max Streak", f"{analysis.max_streak} days")
        st.plotly_chart(activity_heatmap(analysis), use_container_width=True)

    render_pickers(analysis)

    if "recommendations" in sections:
        render_recommendations(analysis, token)

    if "ratings" in sections:
        st.plotly_chart(rating_bars(analysis), use_container_width=True)

    render_resources()

if __name__ == "__main__":
    main()
