"""PDF export module for portfolio-ai."""
from portfolio_ai.export.geometry import PageGeometry
from portfolio_ai.export.layout import ResumeLayout, paginate
from portfolio_ai.export.pdf_writer import render_resume_pdf, write_pdf

__all__ = ["PageGeometry", "ResumeLayout", "paginate", "render_resume_pdf", "write_pdf"]
