from __future__ import annotations

import asyncio
import logging

from dotenv import load_dotenv
load_dotenv()

import streamlit as st

from components.encoder import decode_data_uri
from components.errors import PhysiqueError
from components.gateway import PhysiqueGateway
from components.result_view import render_analysis_result
from components.session_state import PhysiqueSession
from components.ui_theme import (
    apply_theme,
    error_banner,
    feature_grid,
    footer,
    hero_block,
    photo_tag,
    top_nav,
)
from components.workflow import analyze_upload, visualize_progress
from config import ConfigError, UPLOAD_TYPES, load_settings

st.set_page_config(page_title="PhysiqueAI", page_icon="💪", layout="wide")
apply_theme()
st.markdown(
    """
    <style>
      [data-testid="stSidebarNav"] { display: none !important; }
      section[data-testid="stSidebar"] { display: none !important; }
      [data-testid="collapsedControl"] { display: none !important; }
      header[data-testid="stHeader"] { display: none !important; }
      [data-testid="stToolbar"] { display: none !important; }
      [data-testid="stDecoration"] { display: none !important; }
    </style>
    """,
    unsafe_allow_html=True,
)

top_nav()

try:
    settings = load_settings(use_dotenv=False)
except ConfigError as exc:
    st.error(str(exc))
    st.stop()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

for key, default in {
    "physique_session": None,
    "_upload_round": 0,
}.items():
    if key not in st.session_state:
        st.session_state[key] = default
if st.session_state.physique_session is None:
    st.session_state.physique_session = PhysiqueSession()

session: PhysiqueSession = st.session_state.physique_session


def _gateway() -> PhysiqueGateway:
    # One client per action: the async transport is bound to the loop asyncio.run creates.
    return PhysiqueGateway.from_settings(settings)


state = session.state

if state.error:
    c_msg, c_dismiss = st.columns([6, 1])
    with c_msg:
        error_banner(state.error)
    with c_dismiss:
        if st.button("Dismiss", key="dismiss_error", use_container_width=True):
            session.dismiss_error()
            st.rerun()

if state.result is None:
    hero_block()
    uploaded = st.file_uploader(
        "Upload your Photo. Drag & drop or click to upload; full body shots work best.",
        type=UPLOAD_TYPES,
        accept_multiple_files=False,
        disabled=state.busy,
        key=f"photo_{st.session_state._upload_round}",
    )
    if uploaded is not None:
        with st.spinner("Analyzing Physique... Our AI is scanning for muscle balance and posture."):
            try:
                asyncio.run(analyze_upload(session, _gateway(), uploaded))
            except PhysiqueError as exc:
                session.report_error(exc.user_message)
        # Fresh uploader so the same photo can be retried after a failure.
        st.session_state._upload_round += 1
        st.rerun()
    feature_grid()
else:
    c_side, c_main = st.columns([4, 8])

    with c_side:
        if state.preview is not None:
            st.image(state.preview.display())
            photo_tag("BEFORE", "before")

        if state.generated_image:
            st.image(decode_data_uri(state.generated_image))
            photo_tag("AFTER (ESTIMATED)", "after")
        elif state.result.detected:
            label = "Visualizing Progress..." if state.is_generating_image else "✨ Visualize Progress"
            if st.button(
                label,
                type="primary",
                disabled=not state.can_visualize,
                use_container_width=True,
                key="visualize",
            ):
                with st.spinner("Visualizing Progress..."):
                    try:
                        asyncio.run(visualize_progress(session, _gateway()))
                    except PhysiqueError as exc:
                        session.report_error(exc.user_message)
                st.rerun()

        if st.button("← Upload New Photo", use_container_width=True, key="upload_new"):
            session.reset()
            st.rerun()

    with c_main:
        if render_analysis_result(state.result):
            session.reset()
            st.rerun()

footer()
