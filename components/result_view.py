"""Rendering of an AnalysisResult.

``build_result_view`` decides what to show; ``render_analysis_result`` draws
it. A "no person" result only ever touches ``detected`` and ``message``.
"""
from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import streamlit as st

from components.models import AnalysisResult
from config import NO_PERSON_FALLBACK_MESSAGE


@dataclass(frozen=True)
class NoPersonView:
    message: str


@dataclass(frozen=True)
class RoutineCard:
    name: str
    prescription: str
    focus: str


@dataclass(frozen=True)
class DetectedView:
    summary: str
    body_fat: Optional[str]
    target_chips: Tuple[str, ...]
    posture_notes: Tuple[str, ...]
    routine_cards: Tuple[RoutineCard, ...]


ResultView = Union[NoPersonView, DetectedView]


def _capitalize_words(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in text.split())


def build_result_view(result: AnalysisResult) -> ResultView:
    if not result.detected:
        return NoPersonView(message=result.message or NO_PERSON_FALLBACK_MESSAGE)

    return DetectedView(
        summary=result.summary,
        body_fat=result.estimated_body_fat,
        target_chips=tuple(_capitalize_words(area) for area in result.target_areas),
        posture_notes=tuple(result.posture_notes),
        routine_cards=tuple(
            RoutineCard(name=ex.name, prescription=ex.prescription, focus=ex.focus)
            for ex in result.routine
        ),
    )


def _no_person_panel(view: NoPersonView) -> None:
    st.markdown(
        f"""
        <div class="no-person">
          <div class="no-person-title">No Person Detected</div>
          <div class="no-person-body">{html.escape(view.message)}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def _card(title: str, body: str) -> None:
    st.markdown(
        f"<div class='panel'><div class='panel-title'>{title}</div>{body}</div>",
        unsafe_allow_html=True,
    )


def _detected_sections(view: DetectedView) -> None:
    summary = f"<p class='summary'>{html.escape(view.summary)}</p>"
    if view.body_fat:
        summary += (
            "<div class='badge'><span>Est. Body Fat:</span> "
            f"<b>{html.escape(view.body_fat)}</b></div>"
        )
    _card("AI Analysis Summary", summary)

    c_targets, c_posture = st.columns(2)
    with c_targets:
        chips = "".join(f"<span class='chip'>{html.escape(c)}</span>" for c in view.target_chips)
        _card("Target Focus Areas", f"<div class='chips'>{chips}</div>")
    with c_posture:
        notes = "".join(f"<li>{html.escape(n)}</li>" for n in view.posture_notes)
        _card("Posture Notes", f"<ul class='notes'>{notes}</ul>")

    st.markdown("### Recommended Routine")
    columns = st.columns(3)
    for idx, card in enumerate(view.routine_cards):
        with columns[idx % 3]:
            st.markdown(
                f"""
                <div class="routine-card">
                  <div class="routine-name">{html.escape(card.name)}</div>
                  <div class="routine-dose">{html.escape(card.prescription)}</div>
                  <div class="routine-focus">"{html.escape(card.focus)}"</div>
                </div>
                """,
                unsafe_allow_html=True,
            )


def render_analysis_result(result: AnalysisResult) -> bool:
    """Draw the result. Returns True when the user asked to start over."""
    view = build_result_view(result)
    if isinstance(view, NoPersonView):
        _no_person_panel(view)
        return st.button("Try Again", type="primary", key="no_person_retry")

    _detected_sections(view)
    return st.button("Analyze Another Photo", use_container_width=True, key="analyze_another")
