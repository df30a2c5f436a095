import html
import math

import streamlit as st
import plotly.express as px

from estimathon.config import (
    TOTAL_PROBLEMS,
    REFRESH_INTERVAL_SECONDS,
    ANSWER_KEY_FILE,
    RANK_UP,
    RANK_DOWN,
)
from estimathon.ingestion.answer_key import (
    load_answer_key,
    save_answer_key,
    normalize_answer_key,
    answered_problems,
)
from estimathon.ingestion.csv_reader import IngestionError, NoDataError
from estimathon.leaderboard import refresh_leaderboard
from estimathon.scoring.ranking import format_score, leaderboard_to_frame
from estimathon.utils import setup_logging

logger = setup_logging(__name__)

# --- Page Configuration ---
st.set_page_config(
    page_title="Estimathon Leaderboard",
    page_icon="🎯",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# --- Design System ---
ACCENT_COLORS = {
    "primary": "#FACC15",       # Yellow - scores and podium
    "success": "#10B981",       # Green - moved up
    "danger": "#EF4444",        # Red - moved down
    "info": "#3B82F6",          # Blue - informational
}

# --- Leaderboard Flourishes ---
RANK_ICONS = {
    1: {"icon": "🏆", "color": "#FFD700", "label": "Champion"},
    2: {"icon": "🥈", "color": "#C0C0C0", "label": "Runner-up"},
    3: {"icon": "🥉", "color": "#CD7F32", "label": "Third Place"},
}

RANK_ARROWS = {
    RANK_UP: ("↑", ACCENT_COLORS["success"]),
    RANK_DOWN: ("↓", ACCENT_COLORS["danger"]),
}


def init_session_state():
    """Seed per-session state. The rank snapshot lives here between refreshes."""
    if "answer_key" not in st.session_state:
        st.session_state.answer_key = load_answer_key(ANSWER_KEY_FILE)

    defaults = {
        "csv_url": "",
        "is_configured": False,
        "teams": [],
        "previous_ranks": {},
        "last_update": None,
        "no_data": False,
        "last_error": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def run_refresh():
    """
    Recompute the leaderboard and swap teams + snapshot in together.

    On NoDataError the current leaderboard is kept and flagged as waiting.
    """
    try:
        result = refresh_leaderboard(
            st.session_state.csv_url,
            st.session_state.answer_key,
            st.session_state.previous_ranks,
        )
    except NoDataError:
        st.session_state.no_data = True
        st.session_state.last_error = None
        return
    except (IngestionError, ValueError) as e:
        logger.warning(f"Refresh failed: {e}")
        st.session_state.last_error = str(e)
        return

    st.session_state.update({
        "teams": result.teams,
        "previous_ranks": result.snapshot,
        "last_update": result.updated_at,
        "no_data": False,
        "last_error": None,
    })


def generate_team_cards(teams):
    """
    Generate HTML cards for the leaderboard.
    Shows: rank (podium icon for top 3, arrow if moved), team, submissions,
    wrong/blank count and formatted score.
    """
    if not teams:
        return "<p>Waiting for submissions...</p>"

    card_base = "border:1px solid rgba(255,255,255,0.2);border-radius:12px;padding:1rem;margin-bottom:0.75rem;display:flex;align-items:center;gap:1rem;background:var(--secondary-background-color);"
    podium_border = "border:2px solid rgba(250,204,21,0.5);"
    label_style = "font-size:0.8rem;color:var(--text-color);opacity:0.75;"

    cards = []
    for team in teams:
        if team.rank in RANK_ICONS:
            info = RANK_ICONS[team.rank]
            rank_html = f'<span style="color:{info["color"]};font-size:1.8rem;" title="{info["label"]}">{info["icon"]}</span>'
        else:
            rank_html = f'<span style="font-size:1.6rem;font-weight:700;">#{team.rank}</span>'

        if team.rank_change in RANK_ARROWS:
            arrow, color = RANK_ARROWS[team.rank_change]
            rank_html += f'<sup style="color:{color};font-weight:700;">{arrow}</sup>'

        name = html.escape(team.team_name)
        record = team.record
        style = card_base + (podium_border if team.rank <= 3 else "")
        cards.append(
            f'<div style="{style}">'
            f'<div style="min-width:60px;text-align:center;">{rank_html}</div>'
            f'<div style="flex:1;"><div style="font-size:1.25rem;font-weight:700;">{name}</div>'
            f'<div style="{label_style}">{record.total_submissions} submission(s) • {record.wrong_count} wrong/blank</div></div>'
            f'<div style="text-align:right;"><div style="font-size:1.8rem;font-weight:700;color:{ACCENT_COLORS["primary"]};">{format_score(record.score)}</div>'
            f'<div style="{label_style}">score</div></div>'
            f'</div>'
        )
    return "".join(cards)


def build_score_chart(teams):
    """Bar chart of log10(score) per team; scores span many orders of magnitude."""
    df = leaderboard_to_frame(teams)
    df = df[df['score'] > 0].copy()
    if df.empty:
        return None
    df['log10_score'] = df['score'].apply(math.log10)
    fig = px.bar(
        df,
        x='team_name',
        y='log10_score',
        hover_data={'score_display': True, 'wrong_count': True, 'log10_score': ':.2f'},
        labels={'team_name': 'Team', 'log10_score': 'log₁₀(score)'},
        color_discrete_sequence=[ACCENT_COLORS["info"]],
    )
    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        dragmode=False,
        margin=dict(l=10, r=10, t=10, b=10),
    )
    return fig


def render_setup():
    """Ask for the published CSV URL of the form responses."""
    st.title("🎯 Estimathon Setup")
    st.markdown(
        "Create a form with these questions in order: **Team Name**, **Problem Number** "
        f"(1-{TOTAL_PROBLEMS}), **Minimum Value**, **Maximum Value**. "
        "Scientific notation is supported (3e6, 1.5e-3, 4.2E10)."
    )
    st.markdown(
        "1. Open the form responses in Google Sheets\n"
        "2. File → Share → Publish to web\n"
        "3. Choose *Comma-separated values (.csv)*\n"
        "4. Paste the published URL below"
    )
    url = st.text_input("Google Sheets CSV URL", value=st.session_state.csv_url,
                        placeholder="https://docs.google.com/spreadsheets/d/e/...")
    if st.button("Start Leaderboard", disabled=not url.strip()):
        st.session_state.csv_url = url.strip()
        st.session_state.is_configured = True
        st.rerun()


@st.fragment(run_every=REFRESH_INTERVAL_SECONDS)
def render_leaderboard():
    """Leaderboard tab; re-runs on its own every REFRESH_INTERVAL_SECONDS."""
    run_refresh()
    teams = st.session_state.teams

    col_teams, col_update, col_refresh = st.columns(3)
    col_teams.metric("Teams", len(teams))
    last_update = st.session_state.last_update
    col_update.metric("Last Update", last_update.strftime("%H:%M:%S") if last_update else "Loading...")
    # Clicking reruns this fragment, which refreshes above
    col_refresh.button("🔄 Refresh Now", use_container_width=True)

    if st.session_state.last_error:
        st.error(f"Could not refresh: {st.session_state.last_error}")
    if st.session_state.no_data and not teams:
        st.info("Waiting for submissions...")
        return

    st.html(generate_team_cards(teams))

    fig = build_score_chart(teams)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True, config={'displayModeBar': False, 'scrollZoom': False})

    st.caption(
        f"Updates automatically every {REFRESH_INTERVAL_SECONDS} seconds · "
        "Score = Product of interval widths × 2^(wrong answers)"
    )


def render_answers():
    """Organizer form for correct answers; takes effect on the next refresh."""
    st.subheader("Set Correct Answers (Organizer Only)")
    st.write(
        "Enter the correct numerical answer for each problem. You can update these "
        "during the competition as you verify answers. Problems without answers count "
        "as blank and double every team's score."
    )

    current = st.session_state.answer_key
    entries = {}
    columns = st.columns(5)
    for problem_number in range(1, TOTAL_PROBLEMS + 1):
        with columns[(problem_number - 1) % 5]:
            entries[problem_number] = st.text_input(
                f"Problem {problem_number}",
                value=current.get(problem_number, ""),
                placeholder="e.g., 3500",
                key=f"answer_{problem_number}",
            )

    answer_key = normalize_answer_key(entries)
    if answer_key != current:
        st.session_state.answer_key = answer_key

    st.caption(f"{len(answered_problems(answer_key))}/{TOTAL_PROBLEMS} answers set")
    if st.button("💾 Save answers"):
        path = save_answer_key(answer_key, ANSWER_KEY_FILE)
        st.success(f"Saved to {path}")


# --- Main App ---
def main():
    init_session_state()

    if not st.session_state.is_configured:
        render_setup()
        return

    st.title("🏆 Estimathon")
    st.markdown("**Live Leaderboard - Lowest Score Wins!**")

    tab_leaderboard, tab_answers = st.tabs(["🏆 Leaderboard", "⚙️ Correct Answers"])
    # Answers first so an edit is scored in the same rerun
    with tab_answers:
        render_answers()
    with tab_leaderboard:
        render_leaderboard()


if __name__ == "__main__":
    main()
