import random
import re
from pathlib import Path

import streamlit as st

import puzzle_engine as eng
import svg_renderer as svg
import exporter


def load_css(path: str | Path) -> None:
    css_path = Path(path)
    css = css_path.read_text(encoding="utf-8")
    st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)


# ---- preview helper: scale an SVG to a target pixel width (keeps aspect) ----

def _scale_svg_for_preview(svg_text: str, target_width_px: int) -> tuple[str, int]:
    """
    Returns (scaled_svg_text, new_height_px).
    Only used for UI preview; downloads keep the full-size picture.
    """
    m = re.search(r'viewBox="0\s+0\s+([\d.]+)\s+([\d.]+)"', svg_text)
    if not m:
        return svg_text, 600
    vw, vh = float(m.group(1)), float(m.group(2))

    scale = max(0.05, float(target_width_px) / max(1.0, vw))
    new_h = max(50, int(round(vh * scale)))

    # rewrite width/height only on the <svg ...> tag
    s = re.sub(r'(<svg\b[^>]*\bwidth=")[^"]+(")', rf'\g<1>{int(target_width_px)}\g<2>', svg_text, count=1)
    s = re.sub(r'(<svg\b[^>]*\bheight=")[^"]+(")', rf'\g<1>{new_h}\g<2>', s, count=1)
    if 'preserveAspectRatio' not in s[:400]:
        s = re.sub(r'<svg\b', '<svg preserveAspectRatio="xMidYMid meet"', s, count=1)
    return s, new_h


def _ui_log(msg: str) -> None:
    st.session_state.setdefault("log_lines", []).append(msg)


def _export_log(msg: str) -> None:
    st.session_state.setdefault("export_log_lines", []).append(msg)


st.set_page_config(page_title="Word Search Generator", layout="wide")
load_css(Path(__file__).with_name("styles.css"))
st.title("Word Search Generator")

st.session_state.setdefault("puzzle", None)
st.session_state.setdefault("requested", [])
st.session_state.setdefault("show_solution", False)


# --- Controls in the sidebar ---
with st.sidebar:
    tab_create, tab_settings = st.tabs(["Create Puzzle", "Settings"])

    # ---------------------------
    # TAB 1: Create Puzzle
    # ---------------------------
    with tab_create:
        word_text = st.text_area("Words (one per line)", height=220,
                                 placeholder="CAT\nDOG\nBIRD")
        grid_size = st.number_input("Grid size", 5, 30, 15, format="%d")
        seed = st.text_input("Seed (optional)", "")
        go = st.button("Generate", type="primary", use_container_width=True)

    # ---------------------------
    # TAB 2: Settings
    # ---------------------------
    with tab_settings:
        st.caption("Output formats")
        make_png = st.checkbox("PNG", value=True)
        make_pdf = st.checkbox("PDF", value=False)
        make_pptx = st.checkbox("PPTX (simple insert)", value=False)

        st.caption("Preview")
        size_label = st.select_slider("Preview size", options=["Small", "Medium", "Large"], value="Medium")
        PREVIEW_W = {"Small": 420, "Medium": 560, "Large": 720}[size_label]


if go:
    st.session_state["log_lines"] = []
    eng.set_logger(_ui_log)
    try:
        words, size = eng.collect_request(word_text, grid_size)
        rng = random.Random(seed) if seed.strip() else random.Random()
        result = eng.generate(words, size, rng)
    except eng.EmptyWordList as e:
        st.error(str(e))
        st.stop()
    except eng.InvalidConfiguration as e:
        st.error(f"Invalid input: {e}")
        st.stop()
    except Exception as e:
        st.error("Puzzle generation failed")
        st.exception(e)
        st.stop()

    st.session_state["puzzle"] = result
    st.session_state["requested"] = words
    st.session_state["show_solution"] = False


result = st.session_state["puzzle"]
if result is None:
    st.info("Enter some words and press Generate.")
    st.stop()

note = eng.placement_note(st.session_state["requested"], result)
if eng.unplaced_words(st.session_state["requested"], result):
    st.warning(note)
else:
    st.success(note)

label = "Hide Solution" if st.session_state["show_solution"] else "Show Solution"
if st.button(label):
    st.session_state["show_solution"] = not st.session_state["show_solution"]
    st.rerun()

show_solution = st.session_state["show_solution"]
look = svg.Appearance()

# --- Preview ---
try:
    svg_text = svg.render_puzzle_svg(result, look, show_solution=show_solution)
except Exception as e:
    st.error("Rendering failed")
    st.exception(e)
    st.stop()

tab_pic, tab_grid = st.tabs(["Preview — Picture", "Preview — Grid"])

with tab_pic:
    svgp, hp = _scale_svg_for_preview(svg_text, PREVIEW_W)
    st.components.v1.html(svgp, height=hp + 6, scrolling=False)

with tab_grid:
    c_grid, c_list = st.columns([3, 1])
    with c_grid:
        st.markdown(svg.render_grid_html(result, show_solution), unsafe_allow_html=True)
    with c_list:
        st.markdown("**Words to Find:**")
        st.markdown("\n".join(f"- {w}" for w in result.placed_words) or "_none_")

# --- Downloads ---
# export messages belong to this run only; they are redrawn on every rerun
st.session_state["export_log_lines"] = []
exporter.set_logger(_export_log)
try:
    st.download_button(
        "Save as Image",
        data=exporter.export_image(result, show_solution, look, fmt="png"),
        file_name=exporter.export_filename(show_solution),
        mime="image/png",
    )
except Exception as e:
    st.error("PNG export failed (is cairo installed?)")
    st.exception(e)

formats = [f for f, on in (("png", make_png), ("pdf", make_pdf), ("pptx", make_pptx)) if on]
try:
    bundle = exporter.build_zip(result, look, formats)
    st.download_button("Download ZIP", data=bundle, file_name="word-search.zip", mime="application/zip")
except Exception as e:
    st.error("Failed to package outputs")
    st.exception(e)

with st.expander("Log"):
    lines = st.session_state.get("log_lines", []) + st.session_state["export_log_lines"]
    st.code("\n".join(lines) or "(empty)")
