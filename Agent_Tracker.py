# ----------------------------
# Agent Tracker — coachings, side-by-sides and tech monitors per agent
# ----------------------------

import html
import logging

import streamlit as st

from coaching_tracker.config import DEFAULT_REQUIREMENT, REQUIREMENT_MAX, REQUIREMENT_MIN, load_settings
from coaching_tracker.errors import ImportFileError, ReportReadError
from coaching_tracker.persistence import FileKeyValueStore, RosterRepository
from coaching_tracker.reconcile import import_report
from coaching_tracker.roster import RosterStore
from coaching_tracker.scoring import agent_tier, completion_pct, roster_totals, score_value
from coaching_tracker.transfer import export_filename, export_json, parse_import
from coaching_tracker.view import SORT_LABELS, filter_and_sort, roster_table

# ✅ Must be the first Streamlit command
st.set_page_config(page_title="Agent Tracker", page_icon="📋", layout="wide")

st.markdown("""
<style>
:root { --ink:#0F172A; --muted:#E2E8F0; --bg:#F8FAFC; --danger:#B91C1C; }
html, body, .block-container { background-color: var(--bg); }
.card {
  background:white; border:1px solid var(--muted); border-radius:16px;
  padding:1rem 1.2rem; box-shadow:0 1px 2px rgba(0,0,0,0.04); margin-bottom:1rem;
}
.ribbon {
  background: linear-gradient(90deg, rgba(99,102,241,.12), rgba(168,85,247,.12));
  border:1px solid #dbeafe; padding:.8rem 1rem; border-radius:14px; margin:.4rem 0 1rem 0;
}
.tier { display:inline-block; padding:3px 10px; border-radius:999px; color:white; font-size:0.8rem; }
.confirm { border:1px solid var(--danger); border-radius:12px; padding:.8rem 1rem; background:#FEF2F2; }
</style>
""", unsafe_allow_html=True)

settings = load_settings()
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO),
                    format="%(asctime)s %(levelname)s %(name)s: %(message)s")
repo = RosterRepository(FileKeyValueStore(settings.data_dir))

# ---------------------------- Session state ------------------------------------
if "store" not in st.session_state:
    loaded = repo.load()
    st.session_state["store"] = RosterStore(loaded.agents)
    st.session_state["confirm"] = None
    st.session_state["flash"] = None
    st.session_state["show_instructions"] = not repo.instructions_dismissed()
    if loaded.migrated:
        st.session_state["flash"] = ("info", f"Migrated {len(loaded.agents)} agent(s) from an older format."
                                     + (" A backup of the old data was kept." if loaded.backup_written else ""))

store: RosterStore = st.session_state["store"]


def persist():
    repo.save(store.agents)


def apply(changed: bool):
    """Persist after a successful mutation; blank input is a silent no-op."""
    if changed:
        persist()
        st.rerun()


def flash(kind: str, msg: str):
    st.session_state["flash"] = (kind, msg)


def ask_confirm(title: str, body: str, action, label: str = "Confirm"):
    st.session_state["confirm"] = {"title": title, "body": body, "action": action, "label": label}
    st.rerun()


# ---------------------------- Destructive actions ------------------------------
def _do_clear_all():
    store.clear_all()
    repo.clear()


def _do_reset_period():
    if store.reset_period():
        persist()


def _make_replace(agents):
    def _do():
        store.replace_all(agents)
        persist()
    return _do


def _make_delete_agent(agent_id):
    def _do():
        if store.delete_agent(agent_id):
            persist()
    return _do


def _make_delete_record(agent_id, kind, record_id):
    def _do():
        if store.delete_record(agent_id, kind, record_id):
            persist()
    return _do


def _make_delete_follow_up(agent_id, item_id):
    def _do():
        if store.delete_follow_up(agent_id, item_id):
            persist()
    return _do


# ---------------------------- Header -------------------------------------------
st.markdown("<div class='card'><h2>📋 Agent Tracker</h2>"
            "<div class='small'>Coachings, side-by-sides and tech monitors against each agent's requirement.</div></div>",
            unsafe_allow_html=True)

if st.session_state.get("flash"):
    kind, msg = st.session_state["flash"]
    getattr(st, kind, st.info)(msg)
    st.session_state["flash"] = None

pending = st.session_state.get("confirm")
if pending:
    safe_title, safe_body = html.escape(pending["title"]), html.escape(pending["body"])
    st.markdown(f"<div class='confirm'><b>{safe_title}</b><br>{safe_body}</div>", unsafe_allow_html=True)
    c_ok, c_cancel, _ = st.columns([1, 1, 4])
    if c_ok.button(pending["label"], type="primary", key="confirm_ok"):
        pending["action"]()
        st.session_state["confirm"] = None
        st.rerun()
    if c_cancel.button("Cancel", key="confirm_cancel"):
        st.session_state["confirm"] = None
        st.rerun()

# ---------------------------- Sidebar ------------------------------------------
with st.sidebar:
    st.header("Actions")
    if st.button("ℹ️ Instructions"):
        st.session_state["show_instructions"] = True

    with st.expander("👤 Add Agent", expanded=False):
        with st.form("add_agent", clear_on_submit=True):
            new_name = st.text_input("Name")
            new_req = st.number_input("Side-by-side requirement", REQUIREMENT_MIN, REQUIREMENT_MAX,
                                      DEFAULT_REQUIREMENT, step=1)
            if st.form_submit_button("Add"):
                if store.has_name(new_name):
                    flash("warning", f"An agent named {new_name.strip()!r} already exists; added anyway.")
                apply(store.add_agent(new_name, int(new_req)))

    if st.button("💾 Save"):
        persist()
        st.toast("Data saved!")

    if st.button("🧹 New Month"):
        ask_confirm("New month, fresh slate?",
                    "This clears ALL coachings, sides, and tech monitors for every agent — but keeps "
                    "your team, requirements, notes, and follow ups.",
                    _do_reset_period, label="Clear records")

    st.download_button("⬇️ Export JSON",
                       data=export_json(store.agents).encode("utf-8"),
                       file_name=export_filename(),
                       mime="application/json")

    json_file = st.file_uploader("⬆️ Import JSON", type=["json"], key="import_json")
    if json_file is not None and st.button("Load JSON file"):
        try:
            incoming = parse_import(json_file.getvalue().decode("utf-8", errors="replace"))
        except ImportFileError as exc:
            st.error(str(exc))
        else:
            ask_confirm("Load JSON file?",
                        f"This will replace your current in-app data with {len(incoming)} agent(s) from the file.",
                        _make_replace(incoming), label="Load")

    if st.button("🗑️ Clear All"):
        ask_confirm("Clear all data?",
                    "This will remove all agents + records. (A backup may exist if you migrated.)",
                    _do_clear_all, label="Clear")

    bpa_file = st.file_uploader("📊 Import BPA Report", type=["xlsx", "xls", "csv"], key="import_bpa")
    if bpa_file is not None and st.button("Import report"):
        try:
            outcome = import_report(store.agents, bpa_file.getvalue())
        except ReportReadError as exc:
            st.error(f"Could not read the report. {exc}")
        else:
            if outcome.status == "no_data":
                flash("warning", "No data found in the Excel file.")
                st.rerun()
            store.replace_all(outcome.result.agents)
            flash("success", f"BPA import complete. Sheet: {outcome.sheet_name} | Rows read: {outcome.rows_read} "
                             f"| Imported: {outcome.imported} | Skipped (dupes): {outcome.skipped}")
            apply(True)

# ---------------------------- Instructions -------------------------------------
if st.session_state.get("show_instructions"):
    with st.expander("ℹ️ How this works", expanded=True):
        st.markdown("""
- **Add Agent** with a side-by-side requirement (0–99). Completion = (coachings + sides) / (requirement + 1).
- A tech monitor on file adds a 10 point bonus to the score.
- **Import BPA Report**: export the coaching list as `data.xlsx`, then import it here. Re-importing the same
  report skips rows already imported.
- **New Month** clears coachings, sides and tech monitors but keeps notes and follow ups.
- Use **Export JSON** regularly to keep a backup on disk.
""")
        dont_show = st.checkbox("Don't show again", value=False)
        if st.button("Close instructions"):
            repo.set_instructions_dismissed(dont_show)
            st.session_state["show_instructions"] = False
            st.rerun()

# ---------------------------- Totals + toolbar ---------------------------------
totals = roster_totals(store.agents)
st.markdown(f"<div class='ribbon'>🧑‍🤝‍🧑 Agents: <b>{len(store)}</b> &nbsp;|&nbsp; Coachings: <b>{totals.coachings}</b>"
            f" &nbsp;|&nbsp; Sides: <b>{totals.sides}</b> &nbsp;|&nbsp; Techs: <b>{totals.techs}</b>"
            f" &nbsp;|&nbsp; Overall: <b>{totals.pct:.0f}%</b></div>", unsafe_allow_html=True)

t1, t2, t3 = st.columns([3, 2, 1])
query = t1.text_input("Search agent")
sort_key = t2.selectbox("Sort by", list(SORT_LABELS), format_func=SORT_LABELS.get)
direction = t3.selectbox("Order", ["asc", "desc"])
visible = filter_and_sort(store.agents, query, sort_key, direction)

if not visible:
    st.info("No agents yet. Add one from the sidebar or import a BPA report.")
else:
    st.dataframe(roster_table(visible), use_container_width=True, hide_index=True)
    st.download_button("⬇️ Download roster.csv",
                       data=roster_table(visible).to_csv(index=False).encode("utf-8"),
                       file_name="roster.csv", mime="text/csv")

# ---------------------------- Agent panels -------------------------------------
RECORD_TABS = [("coaching", "Coachings"), ("side", "Sides"), ("tech", "Tech Monitors")]

for pos, agent in enumerate(visible):
    # record and agent ids can repeat (same BPA Id per list, JSON imports); position keeps keys unique
    akey = f"{pos}_{agent.id}"
    label, colour = agent_tier(agent)
    header = (f"👤 {agent.name} — {completion_pct(agent):.0f}% complete · score {score_value(agent):.0f} ({label})")
    with st.expander(header, expanded=False):
        st.markdown(f"<span class='tier' style='background:{colour}'>{html.escape(label)}</span>",
                    unsafe_allow_html=True)

        with st.form(f"edit_{akey}"):
            e1, e2 = st.columns([3, 1])
            name = e1.text_input("Name", agent.name, key=f"name_{akey}")
            req = e2.number_input("Requirement", REQUIREMENT_MIN, REQUIREMENT_MAX, agent.requirement, step=1,
                                  key=f"req_{akey}")
            if st.form_submit_button("Save agent"):
                apply(store.edit_agent(agent.id, name, int(req)))
        if st.button("Delete agent", key=f"del_{akey}"):
            ask_confirm("Delete agent?",
                        f'This will delete "{agent.name}" and all their records, notes, and follow ups.',
                        _make_delete_agent(agent.id), label="Delete")

        tabs = st.tabs([t for _, t in RECORD_TABS] + ["Notes", "Follow Ups"])
        for (kind, _), tab in zip(RECORD_TABS, tabs):
            records = {"coaching": agent.coachings, "side": agent.sides, "tech": agent.techs}[kind]
            with tab:
                with st.form(f"add_{kind}_{akey}", clear_on_submit=True):
                    d = st.text_input("Date", key=f"d_{kind}_{akey}")
                    body = st.text_input("Score" if kind == "tech" else "Notes", key=f"b_{kind}_{akey}")
                    if st.form_submit_button("Add"):
                        if kind == "tech":
                            apply(store.upsert_score(agent.id, None, d, body))
                        else:
                            apply(store.upsert_interaction(agent.id, kind, None, d, body))
                for i, rec in enumerate(records):
                    text = rec.score if kind == "tech" else rec.notes
                    r1, r2, r3, r4 = st.columns([2, 5, 1, 1])
                    new_date = r1.text_input("Date", rec.date, key=f"rd_{kind}_{akey}_{i}_{rec.id}",
                                             label_visibility="collapsed")
                    new_text = r2.text_input("Text", text, key=f"rt_{kind}_{akey}_{i}_{rec.id}",
                                             label_visibility="collapsed")
                    if r3.button("Save", key=f"rs_{kind}_{akey}_{i}_{rec.id}"):
                        if kind == "tech":
                            apply(store.upsert_score(agent.id, rec.id, new_date, new_text))
                        else:
                            apply(store.upsert_interaction(agent.id, kind, rec.id, new_date, new_text))
                    if r4.button("🗑️", key=f"rx_{kind}_{akey}_{i}_{rec.id}"):
                        ask_confirm("Delete record?", "This will permanently remove the selected record.",
                                    _make_delete_record(agent.id, kind, rec.id), label="Delete")

        with tabs[3]:
            draft = st.text_area("Notes", agent.notes, key=f"notes_{akey}")
            if st.button("Save notes", key=f"save_notes_{akey}"):
                apply(store.set_notes(agent.id, draft))

        with tabs[4]:
            with st.form(f"add_fu_{akey}", clear_on_submit=True):
                fu = st.text_input("Follow up", key=f"fu_{akey}")
                if st.form_submit_button("Add"):
                    apply(store.upsert_follow_up(agent.id, None, fu))
            for j, item in enumerate(agent.follow_ups):
                f1, f2, f3 = st.columns([6, 1, 1])
                txt = f1.text_input("Item", item.text, key=f"ft_{akey}_{j}_{item.id}",
                                  label_visibility="collapsed")
                if f2.button("Save", key=f"fs_{akey}_{j}_{item.id}"):
                    apply(store.upsert_follow_up(agent.id, item.id, txt))
                if f3.button("🗑️", key=f"fx_{akey}_{j}_{item.id}"):
                    ask_confirm("Delete follow up?", "This will remove the selected follow up item.",
                                _make_delete_follow_up(agent.id, item.id), label="Delete")
