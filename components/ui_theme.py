from __future__ import annotations

import html
from datetime import date

import streamlit as st


def apply_theme() -> None:
    st.markdown(
        """
        <style>
          @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

          :root {
            --bg: #0f172a;
            --surface: #1e293b;
            --line: rgba(255, 255, 255, 0.08);
            --text: #f1f5f9;
            --muted: #94a3b8;
            --primary: #10b981;
            --secondary: #3b82f6;
            --accent: #a855f7;
            --danger: #f87171;
          }

          .stApp {
            background: var(--bg);
            color: var(--text);
            font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
          }

          .block-container {
            max-width: 1180px;
            padding-top: 1.0rem;
            padding-bottom: 2rem;
          }

          h1, h2, h3 {
            color: var(--text) !important;
            letter-spacing: -0.01em;
          }

          .top-nav {
            border-bottom: 1px solid var(--line);
            padding: 0.45rem 0;
            margin-bottom: 1.2rem;
          }

          .brand-mark {
            font-size: 1.35rem;
            font-weight: 700;
            background: linear-gradient(90deg, #ffffff, #9ca3af);
            -webkit-background-clip: text;
            color: transparent;
          }

          .hero-wrap {
            text-align: center;
            margin: 1.5rem 0 2.5rem 0;
          }

          .pill {
            display: inline-block;
            border: 1px solid rgba(59, 130, 246, 0.25);
            border-radius: 999px;
            padding: 0.2rem 0.75rem;
            color: var(--secondary);
            background: rgba(59, 130, 246, 0.1);
            font-size: 0.82rem;
            margin-bottom: 1rem;
          }

          .display-title {
            font-size: 3.2rem;
            font-weight: 700;
            line-height: 1.05;
            color: #ffffff;
          }

          .display-title span {
            background: linear-gradient(90deg, var(--primary), #6ee7b7);
            -webkit-background-clip: text;
            color: transparent;
          }

          .hero-sub {
            color: var(--muted) !important;
            max-width: 640px;
            margin: 0.8rem auto 0 auto;
            font-size: 1.1rem;
          }

          .feature-grid {
            display: grid;
            grid-template-columns: repeat(3, 1fr);
            gap: 1.5rem;
            margin-top: 2.5rem;
            text-align: center;
            opacity: 0.6;
          }

          .feature-grid .icon { font-size: 1.6rem; }
          .feature-grid .title { font-weight: 600; color: #fff; margin-top: 0.4rem; }
          .feature-grid .hint { color: var(--muted); font-size: 0.85rem; }

          .error-banner {
            padding: 0.9rem 1rem;
            border-radius: 10px;
            border: 1px solid rgba(248, 113, 113, 0.25);
            background: rgba(248, 113, 113, 0.1);
            color: var(--danger);
            text-align: center;
          }

          .panel, .routine-card, .no-person {
            background: var(--surface);
            border: 1px solid var(--line);
            border-radius: 16px;
            padding: 1.2rem 1.3rem;
            margin-bottom: 1rem;
          }

          .panel-title { font-weight: 600; font-size: 1.05rem; color: #fff; margin-bottom: 0.6rem; }
          .summary { color: #cbd5e1; font-size: 1.05rem; line-height: 1.55; }

          .badge {
            display: inline-block;
            margin-top: 0.6rem;
            padding: 0.35rem 0.9rem;
            border-radius: 999px;
            border: 1px solid rgba(16, 185, 129, 0.25);
            background: rgba(16, 185, 129, 0.1);
          }

          .badge span { color: var(--primary); }

          .chips { display: flex; flex-wrap: wrap; gap: 0.5rem; }

          .chip {
            padding: 0.4rem 0.8rem;
            border-radius: 8px;
            background: rgba(255, 255, 255, 0.05);
            border-left: 3px solid var(--secondary);
            color: #e2e8f0;
          }

          .notes { margin: 0; padding-left: 1.1rem; color: #e2e8f0; }
          .notes li::marker { color: #fb923c; }

          .routine-name { font-size: 1.15rem; font-weight: 700; color: #fff; }

          .routine-dose {
            color: var(--primary);
            font-size: 0.8rem;
            font-weight: 600;
            letter-spacing: 0.06em;
            text-transform: uppercase;
            margin: 0.2rem 0 0.8rem 0;
          }

          .routine-focus {
            border-top: 1px solid var(--line);
            padding-top: 0.7rem;
            color: var(--muted);
            font-style: italic;
            font-size: 0.88rem;
          }

          .no-person {
            text-align: center;
            border-color: rgba(248, 113, 113, 0.25);
            background: rgba(248, 113, 113, 0.08);
          }

          .no-person-title { color: var(--danger); font-weight: 700; font-size: 1.2rem; }
          .no-person-body { color: #cbd5e1; margin-top: 0.4rem; }

          .photo-tag {
            display: inline-block;
            font-family: monospace;
            font-size: 0.75rem;
            padding: 0.1rem 0.45rem;
            border-radius: 4px;
            background: rgba(0, 0, 0, 0.5);
            margin: 0.2rem 0 0.8rem 0;
          }

          .photo-tag.before { color: var(--primary); }
          .photo-tag.after { color: var(--accent); }

          .stButton > button {
            border-radius: 10px;
            border: 1px solid var(--line);
            padding: 0.55rem 0.95rem;
            font-weight: 600;
            background: rgba(255, 255, 255, 0.05);
            color: var(--text);
          }

          .stButton > button[kind="primary"] {
            background: linear-gradient(90deg, rgba(147, 51, 234, 0.35), rgba(37, 99, 235, 0.35));
            border-color: rgba(168, 85, 247, 0.35);
            color: #ffffff;
          }

          [data-testid="stFileUploaderDropzone"] {
            background: var(--surface) !important;
            border: 2px dashed var(--line) !important;
            border-radius: 24px !important;
            min-height: 12rem;
          }

          [data-testid="stFileUploaderDropzone"] button {
            background: var(--primary) !important;
            color: #0f172a !important;
            border: 0 !important;
            border-radius: 10px !important;
            font-weight: 600 !important;
          }

          .footer {
            border-top: 1px solid var(--line);
            margin-top: 3rem;
            padding-top: 1.5rem;
            text-align: center;
            color: #64748b;
            font-size: 0.85rem;
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


def top_nav() -> None:
    st.markdown(
        """
        <div class="top-nav">
          <div class="brand-mark">PhysiqueAI</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def hero_block() -> None:
    st.markdown(
        """
        <div class="hero-wrap">
          <div class="pill">Powered by Gemini Vision</div>
          <div class="display-title">Transform Your Body<br/><span>With AI Precision</span></div>
          <div class="hero-sub">Upload a photo to detect muscle imbalances, correct posture, and get a tailored workout plan instantly.</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def feature_grid() -> None:
    features = [
        ("💪", "Muscle Analysis", "Identify lagging groups instantly."),
        ("🦴", "Posture Correction", "Spot alignment issues early."),
        ("⚡", "Smart Routines", "Personalized sets and reps."),
    ]
    bits = ["<div class='feature-grid'>"]
    for icon, title, hint in features:
        bits.append(
            f"<div><div class='icon'>{icon}</div><div class='title'>{title}</div>"
            f"<div class='hint'>{hint}</div></div>"
        )
    bits.append("</div>")
    st.markdown("".join(bits), unsafe_allow_html=True)


def error_banner(message: str) -> None:
    st.markdown(f"<div class='error-banner'>{html.escape(message)}</div>", unsafe_allow_html=True)


def photo_tag(label: str, kind: str) -> None:
    st.markdown(f"<span class='photo-tag {kind}'>{label}</span>", unsafe_allow_html=True)


def footer() -> None:
    st.markdown(
        f"""
        <div class="footer">
          © {date.today().year} PhysiqueAI. Not medical advice. Consult a professional
          before starting any diet or exercise program.
        </div>
        """,
        unsafe_allow_html=True,
    )
