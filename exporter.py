from __future__ import annotations

import io
import zipfile
from typing import List, Optional, Sequence

from puzzle_engine import PuzzleError, PuzzleResult
from svg_renderer import Appearance, render_puzzle_svg

FORMATS = ("png", "pdf", "pptx")


# -----------------------------------------------------------------------------
# Simple logger hook (mirrors puzzle_engine)
# -----------------------------------------------------------------------------
_LOGGER = None  # type: Optional[callable]


def set_logger(fn) -> None:
    """Allow the UI to inject a logger callback: fn(text: str)."""
    global _LOGGER
    _LOGGER = fn


def _log(msg: str) -> None:
    if _LOGGER:
        _LOGGER(msg)
        return
    print(msg)


class ExportError(PuzzleError):
    """Unknown output format or an unusable image."""


def export_filename(show_solution: bool, ext: str = "png") -> str:
    """word-search-puzzle.png / word-search-solution.png"""
    return f"word-search-{'solution' if show_solution else 'puzzle'}.{ext}"


# -----------------------------------------------------------------------------
# Rasterizing (CairoSVG is imported on use: it needs the native cairo library)
# -----------------------------------------------------------------------------
def svg_to_png(svg_text: str) -> bytes:
    from cairosvg import svg2png
    return svg2png(bytestring=svg_text.encode("utf-8"))


def svg_to_pdf(svg_text: str) -> bytes:
    from cairosvg import svg2pdf
    return svg2pdf(bytestring=svg_text.encode("utf-8"))


def build_pptx(png_images: Sequence[bytes]) -> bytes:
    """One blank slide per image, picture pinned to the top-left margin."""
    if not png_images:
        raise ExportError("pptx: no images to insert")
    from pptx import Presentation
    from pptx.util import Inches

    prs = Presentation()
    blank = prs.slide_layouts[6]
    for png in png_images:
        slide = prs.slides.add_slide(blank)
        stream = io.BytesIO(png)
        slide.shapes.add_picture(stream, Inches(0.5), Inches(0.5), height=Inches(6.5))
    out = io.BytesIO()
    prs.save(out)
    return out.getvalue()


def export_image(
    result: PuzzleResult,
    show_solution: bool = False,
    appearance: Optional[Appearance] = None,
    fmt: str = "png",
) -> bytes:
    """Render the current view and convert it. svg returns the raw markup as bytes."""
    svg_text = render_puzzle_svg(result, appearance, show_solution=show_solution)
    fmt = (fmt or "").lower()
    if fmt == "svg":
        return svg_text.encode("utf-8")
    if fmt == "png":
        return svg_to_png(svg_text)
    if fmt == "pdf":
        return svg_to_pdf(svg_text)
    if fmt == "pptx":
        return build_pptx([svg_to_png(svg_text)])
    raise ExportError(f"unknown export format: {fmt!r}")


def build_zip(
    result: PuzzleResult,
    appearance: Optional[Appearance] = None,
    formats: Sequence[str] = ("png",),
) -> bytes:
    """
    Puzzle and solution SVGs plus the requested conversions.
    A failed conversion is written into the archive as *_ERROR.txt
    so one broken format does not cost the user the rest.
    """
    wanted = [f.lower() for f in formats]
    for f in wanted:
        if f not in FORMATS:
            raise ExportError(f"unknown export format: {f!r}")

    svgs = [
        (export_filename(False, "svg"), render_puzzle_svg(result, appearance, show_solution=False)),
        (export_filename(True, "svg"), render_puzzle_svg(result, appearance, show_solution=True)),
    ]
    slides: List[bytes] = []

    mem = io.BytesIO()
    with zipfile.ZipFile(mem, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, s in svgs:
            zf.writestr(name, s)

        for name, s in svgs:
            if "png" in wanted or "pptx" in wanted:
                try:
                    png = svg_to_png(s)
                    if "png" in wanted:
                        zf.writestr(name.replace(".svg", ".png"), png)
                    if "pptx" in wanted:
                        slides.append(png)
                except Exception as e:
                    _log(f"export: PNG conversion failed for {name}: {e}")
                    zf.writestr(name.replace(".svg", ".PNG_ERROR.txt"),
                                f"PNG conversion failed for {name}:\n{e}".encode("utf-8"))

            if "pdf" in wanted:
                try:
                    zf.writestr(name.replace(".svg", ".pdf"), svg_to_pdf(s))
                except Exception as e:
                    _log(f"export: PDF conversion failed for {name}: {e}")
                    zf.writestr(name.replace(".svg", ".PDF_ERROR.txt"),
                                f"PDF conversion failed for {name}:\n{e}".encode("utf-8"))

        if slides:
            zf.writestr("word-search.pptx", build_pptx(slides))

    mem.seek(0)
    return mem.read()
